"""
Recording Utilities

Shared utility functions for recording operations.
"""

import uuid
from datetime import datetime
from pathlib import Path

from recording.constants import (
    FILENAME_FORMAT,
    VIDEO_FILENAME_EXTENSION,
    VIDEO_FILENAME_PREFIX,
)


def new_session_id() -> str:
    """
    Generate a unique session identifier.

    Example:
        new_session_id() -> "3f2b8c0e5d8a4c1f9e7b6a5d4c3b2a19"
    """
    return uuid.uuid4().hex


def generate_filename(
    base_path: Path,
    session_id: str,
    prefix: str = VIDEO_FILENAME_PREFIX,
    extension: str = VIDEO_FILENAME_EXTENSION,
) -> Path:
    """
    Generate timestamped filename for recording.

    The short session id suffix keeps two sessions started in the same
    second apart.

    Example:
        path = generate_filename(Path("/recordings"), "3f2b8c0e...")
        # Returns: /recordings/recording_2025-01-15_143022_3f2b8c0e.mp4
    """
    timestamp = datetime.now().strftime(FILENAME_FORMAT)
    return base_path / f"{prefix}_{timestamp}_{session_id[:8]}{extension}"


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in human-readable form.

    Example:
        format_file_size(1536) -> "1.5 KB"
        format_file_size(52428800) -> "50.0 MB"
    """
    size = float(size_bytes)
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} GB"
