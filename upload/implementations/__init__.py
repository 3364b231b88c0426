"""
Implementations Package

Concrete uploader implementations.
"""

from upload.implementations.drive_uploader import DriveUploader
from upload.implementations.mock_uploader import MockUploader

__all__ = [
    "DriveUploader",
    "MockUploader",
]
