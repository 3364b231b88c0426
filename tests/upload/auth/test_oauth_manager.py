"""
OAuth Manager Tests

Token loading is patched; no browser or network access.
"""

import stat
from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import RefreshError

from upload.auth.oauth_manager import OAuthManager
from upload.constants import DRIVE_SCOPES


@pytest.fixture
def secret_files(tmp_path):
    client_secret = tmp_path / "client_secret.json"
    token = tmp_path / "token.json"
    client_secret.write_text("{}")
    token.write_text("{}")
    return client_secret, token


def _credentials(valid=True, expired=False, scopes=None):
    credentials = MagicMock()
    credentials.valid = valid
    credentials.expired = expired
    credentials.refresh_token = "refresh-token"
    credentials.scopes = DRIVE_SCOPES if scopes is None else scopes
    credentials.to_json.return_value = '{"token": "new"}'
    return credentials


def _load(credentials):
    return patch(
        "upload.auth.oauth_manager.Credentials.from_authorized_user_file",
        return_value=credentials,
    )


@pytest.mark.unit
class TestOAuthManager:
    """Token validation and refresh"""

    def test_missing_client_secret(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            OAuthManager(tmp_path / "nope.json", tmp_path / "token.json")

    def test_missing_token(self, secret_files):
        client_secret, token = secret_files
        token.unlink()

        with pytest.raises(RuntimeError, match="setup_drive_auth"):
            OAuthManager(client_secret, token)

    def test_valid_token(self, secret_files):
        credentials = _credentials()
        with _load(credentials):
            manager = OAuthManager(*secret_files)

        assert manager.is_authenticated() is True
        assert manager.get_credentials() is credentials
        credentials.refresh.assert_not_called()

    def test_token_without_drive_scope(self, secret_files):
        credentials = _credentials(scopes=["https://www.googleapis.com/auth/youtube.upload"])

        with _load(credentials), pytest.raises(RuntimeError, match="drive.file"):
            OAuthManager(*secret_files)

    def test_expired_token_is_refreshed_and_saved(self, secret_files):
        _, token = secret_files
        credentials = _credentials(valid=False, expired=True)

        def refresh(_request):
            credentials.valid = True
            credentials.expired = False

        credentials.refresh.side_effect = refresh

        with _load(credentials):
            manager = OAuthManager(*secret_files)

        assert manager.is_authenticated() is True
        assert token.read_text() == '{"token": "new"}'
        assert stat.S_IMODE(token.stat().st_mode) == 0o600

    def test_refresh_failure(self, secret_files):
        credentials = _credentials(valid=False, expired=True)
        credentials.refresh.side_effect = RefreshError("revoked")

        with _load(credentials), pytest.raises(RuntimeError, match="refresh failed"):
            OAuthManager(*secret_files)

    def test_invalid_without_refresh_token(self, secret_files):
        credentials = _credentials(valid=False, expired=True)
        credentials.refresh_token = None

        with _load(credentials), pytest.raises(RuntimeError, match="cannot be refreshed"):
            OAuthManager(*secret_files)
