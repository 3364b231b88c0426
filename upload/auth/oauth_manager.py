"""
OAuth Manager

Keeps a Google OAuth 2.0 token usable for the Drive API.

Flow:
1. setup_drive_auth.py runs the browser consent once and writes token.json
2. At runtime OAuthManager loads token.json and refreshes it when expired
3. Refreshed tokens are written back so the next start skips the refresh

A token created with other scopes (e.g. an older consent) is rejected at
load time instead of failing on the first upload.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from upload.constants import DRIVE_SCOPES

PathLike = Union[str, Path]

_REAUTH_HINT = "Run 'python setup_drive_auth.py' to re-authenticate"


def _write_token(path: Path, credentials: Credentials) -> None:
    """Write token JSON readable by the owner only"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(credentials.to_json(), encoding="utf-8")
    os.chmod(path, 0o600)


class OAuthManager:
    """
    Loads, validates and refreshes Drive credentials.

    Usage:
        oauth = OAuthManager("credentials/client_secret.json",
                             "credentials/token.json")
        service = build("drive", "v3", credentials=oauth.get_credentials())
    """

    def __init__(
        self,
        client_secret_path: PathLike,
        token_path: PathLike,
        scopes: Optional[List[str]] = None,
    ):
        """
        Args:
            client_secret_path: OAuth client file from Google Cloud Console
            token_path: Token written by setup_drive_auth.py
            scopes: Required scopes (default: drive.file)

        Raises:
            FileNotFoundError: If client_secret.json doesn't exist
            RuntimeError: If the token is missing, lacks a scope or
                          cannot be refreshed
        """
        self.logger = logging.getLogger(__name__)
        self.client_secret_path = Path(client_secret_path)
        self.token_path = Path(token_path)
        self.scopes = list(scopes or DRIVE_SCOPES)
        self.credentials: Optional[Credentials] = None

        self._check_files()
        self._load_credentials()

        self.logger.info(f"OAuth Manager initialized (token: {self.token_path})")

    def _check_files(self) -> None:
        if not self.client_secret_path.exists():
            raise FileNotFoundError(
                f"Client secret file not found: {self.client_secret_path}\n"
                f"Download it from Google Cloud Console > APIs & Services > Credentials",
            )

        if not self.token_path.exists():
            raise RuntimeError(f"Token file not found: {self.token_path}\n{_REAUTH_HINT}")

    def _load_credentials(self) -> None:
        credentials = Credentials.from_authorized_user_file(str(self.token_path))

        missing = self.missing_scopes(credentials)
        if missing:
            raise RuntimeError(
                f"Token does not grant {', '.join(missing)}. {_REAUTH_HINT}",
            )

        self.credentials = credentials
        if credentials.valid:
            self.logger.debug("Credentials loaded")
            return

        if credentials.expired and credentials.refresh_token:
            self.logger.info("Access token expired, refreshing...")
            self._refresh()
            return

        raise RuntimeError(f"Credentials invalid and cannot be refreshed. {_REAUTH_HINT}")

    def missing_scopes(self, credentials: Credentials) -> List[str]:
        """Required scopes the token was not granted (unknown = assume granted)"""
        granted = credentials.scopes
        if not granted:
            return []
        return [scope for scope in self.scopes if scope not in granted]

    def _refresh(self) -> None:
        try:
            self.credentials.refresh(Request())
        except GoogleAuthError as e:
            raise RuntimeError(f"Token refresh failed: {e}") from e

        self.logger.info("Access token refreshed")
        try:
            _write_token(self.token_path, self.credentials)
        except OSError as e:
            self.logger.warning(f"Could not save refreshed token: {e}")

    def get_credentials(self) -> Credentials:
        """
        Valid credentials, refreshed first if the access token expired.

        Raises:
            RuntimeError: If no valid credentials can be produced
        """
        credentials = self.credentials
        if credentials is not None and credentials.expired and credentials.refresh_token:
            self.logger.debug("Token expired, refreshing...")
            self._refresh()

        if self.credentials is None or not self.credentials.valid:
            raise RuntimeError(f"Cannot get valid credentials. {_REAUTH_HINT}")
        return self.credentials

    def is_authenticated(self) -> bool:
        try:
            return self.get_credentials().valid
        except RuntimeError:
            return False


def run_initial_auth(
    client_secret_path: PathLike,
    token_path: PathLike,
    port: int = 8080,
    scopes: Optional[List[str]] = None,
) -> bool:
    """
    Run the browser consent flow and save the resulting token.

    Returns:
        True if a token was written

    Example:
        run_initial_auth("credentials/client_secret.json", "credentials/token.json")
    """
    logger = logging.getLogger(__name__)

    try:
        flow = InstalledAppFlow.from_client_secrets_file(
            str(client_secret_path),
            scopes or DRIVE_SCOPES,
        )

        logger.info(f"Starting OAuth flow on port {port}...")
        logger.info("A browser window will open for authentication")
        credentials = flow.run_local_server(port=port)

        _write_token(Path(token_path), credentials)
        logger.info(f"Authentication successful! Token saved to: {token_path}")
        return True

    except (OSError, ValueError, GoogleAuthError) as e:
        logger.error(f"Authentication failed: {e}")
        return False
