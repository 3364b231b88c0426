"""
Recording Utilities Package

Exposes shared utility functions for recording operations.
"""

from recording.utils.recording_utils import (
    format_file_size,
    generate_filename,
    new_session_id,
)

# Public API
__all__ = [
    "format_file_size",
    "generate_filename",
    "new_session_id",
]
