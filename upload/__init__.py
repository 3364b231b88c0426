"""
Upload Module

Hands finished recordings and their GPS logs to Google Drive.

Public API:
    - UploadHandoff: Submission plus retained failures for retry
    - UploadResult: Upload operation result
    - UploadStatus: Status codes
    - SessionMetadata / RetainedUpload: Upload models
    - create_uploader / create_upload_handoff: Factory functions

Usage:
    from upload import create_upload_handoff

    handoff = create_upload_handoff()
    result = handoff.submit(artifact, gps_log, metadata)
    if not result.success:
        handoff.retry(artifact.session_id)
"""

from upload.constants import UploadStatus
from upload.controllers.upload_handoff import UploadHandoff
from upload.factory import UploaderFactory, create_upload_handoff, create_uploader
from upload.interfaces.uploader_interface import UploaderError, UploadResult
from upload.models.retained_upload import RetainedUpload
from upload.models.session_metadata import SessionMetadata

# Public API
__all__ = [
    "RetainedUpload",
    "SessionMetadata",
    "UploadHandoff",
    "UploadResult",
    "UploadStatus",
    "UploaderError",
    "UploaderFactory",
    "create_upload_handoff",
    "create_uploader",
]
