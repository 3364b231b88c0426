"""
Upload Constants

Centralized configuration for the Google Drive upload module.

Note: Tunable values and secrets live in config/settings.py and are
re-exported here.
"""

from enum import Enum

from config.settings import (
    DRIVE_FOLDER_ID,
    GOOGLE_CLIENT_SECRET_PATH,
    GOOGLE_TOKEN_PATH,
    UPLOAD_CHUNK_SIZE,
    UPLOAD_TIMEOUT,
)

__all__ = [
    "DRIVE_API_SERVICE_NAME",
    "DRIVE_API_VERSION",
    "DRIVE_FOLDER_ID",
    "DRIVE_SCOPES",
    "GOOGLE_CLIENT_SECRET_PATH",
    "GOOGLE_TOKEN_PATH",
    "GPS_LOG_MIME_TYPE",
    "GPS_LOG_SUFFIX",
    "SUPPORTED_VIDEO_FORMATS",
    "UPLOAD_CHUNK_SIZE",
    "UPLOAD_TIMEOUT",
    "VIDEO_MIME_TYPE",
    "UploadStatus",
]

# =============================================================================
# GOOGLE DRIVE API CONFIGURATION
# =============================================================================

# drive.file: access only to files this app created
# https://developers.google.com/drive/api/guides/api-specific-auth
DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.file"]

# Drive API service details
DRIVE_API_SERVICE_NAME = "drive"
DRIVE_API_VERSION = "v3"

# =============================================================================
# FILE TYPES
# =============================================================================

VIDEO_MIME_TYPE = "video/mp4"

# GPS log is uploaded next to the video as <video stem>.gps.jsonl
GPS_LOG_SUFFIX = ".gps.jsonl"
GPS_LOG_MIME_TYPE = "application/x-ndjson"

# Supported video formats
SUPPORTED_VIDEO_FORMATS = [".mp4", ".avi", ".mov", ".mkv"]

# =============================================================================
# UPLOAD STATUS
# =============================================================================


class UploadStatus(Enum):
    """Upload operation status codes"""

    SUCCESS = "success"
    FAILED = "failed"
    TIMEOUT = "timeout"
    AUTH_ERROR = "auth_error"
    NETWORK_ERROR = "network_error"
    INVALID_FILE = "invalid_file"
    QUOTA_EXCEEDED = "quota_exceeded"
    REJECTED = "rejected"  # Nothing submitted (unknown id or already in flight)
