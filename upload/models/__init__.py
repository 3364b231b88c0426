"""Upload data models"""

from upload.models.retained_upload import RetainedUpload
from upload.models.session_metadata import SessionMetadata

__all__ = ["RetainedUpload", "SessionMetadata"]
