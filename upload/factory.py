"""
Upload Factory

Factory pattern for creating uploader implementations.
Configured from config/settings.py (which reads .env).
"""

import logging
from typing import Literal, Optional

from upload.auth.oauth_manager import OAuthManager
from upload.constants import DRIVE_FOLDER_ID, GOOGLE_CLIENT_SECRET_PATH, GOOGLE_TOKEN_PATH
from upload.controllers.upload_handoff import UploadHandoff
from upload.implementations.drive_uploader import DriveUploader
from upload.implementations.mock_uploader import MockUploader
from upload.interfaces.uploader_interface import UploaderInterface

# Type alias
UploaderMode = Literal["auto", "drive", "mock"]


class UploaderFactory:
    """
    Factory for creating uploader implementations.

    Reads configuration from environment variables:
    - GOOGLE_CLIENT_SECRET_PATH: Path to client_secret.json
    - GOOGLE_TOKEN_PATH: Path to token.json
    - DRIVE_FOLDER_ID: Target folder (optional)

    Usage:
        # Auto-detect from environment
        uploader = UploaderFactory.create_uploader()

        # Force mock for testing
        uploader = UploaderFactory.create_uploader(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_uploader(
        cls,
        mode: UploaderMode = "auto",
        folder_id: Optional[str] = None,
    ) -> UploaderInterface:
        """
        Create an uploader instance.

        Args:
            mode: "auto" (from env), "drive" (force real), "mock" (force sim)
            folder_id: Override folder ID from environment

        Raises:
            RuntimeError: If mode="drive" but credentials not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Uploader (forced)")
            return MockUploader()

        if mode == "drive":
            try:
                uploader = cls._create_drive_uploader(folder_id)
            except Exception as e:
                raise RuntimeError(
                    f"Drive uploader requested but not available: {e}",
                ) from e
            cls._logger.info("Creating Drive Uploader (forced)")
            return uploader

        # mode == "auto" - try Drive first, fall back to mock
        try:
            uploader = cls._create_drive_uploader(folder_id)
            cls._logger.info("Creating Drive Uploader (auto-detected)")
            return uploader
        except Exception as e:
            cls._logger.warning(f"Drive uploader not available ({e}), using Mock Uploader")
            return MockUploader()

    @classmethod
    def _create_drive_uploader(cls, folder_id: Optional[str] = None) -> DriveUploader:
        """
        Create Drive uploader from configuration.

        Raises:
            FileNotFoundError / RuntimeError: If OAuth files are missing/invalid
        """
        oauth_manager = OAuthManager(
            client_secret_path=GOOGLE_CLIENT_SECRET_PATH,
            token_path=GOOGLE_TOKEN_PATH,
        )
        return DriveUploader(
            oauth_manager=oauth_manager,
            folder_id=folder_id or DRIVE_FOLDER_ID,
        )


# Convenience functions for quick creation

def create_uploader(
    force_mock: bool = False,
    folder_id: Optional[str] = None,
) -> UploaderInterface:
    """
    Quick uploader creation with simple mock override.

    Example:
        uploader = create_uploader(force_mock=True)
    """
    mode: UploaderMode = "mock" if force_mock else "auto"
    return UploaderFactory.create_uploader(mode=mode, folder_id=folder_id)


def create_upload_handoff(force_mock: bool = False) -> UploadHandoff:
    """
    Quick handoff creation with an auto-selected uploader.

    Example:
        handoff = create_upload_handoff(force_mock=True)
    """
    return UploadHandoff(create_uploader(force_mock=force_mock))
