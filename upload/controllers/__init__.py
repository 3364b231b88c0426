"""
Controllers Package

High-level upload coordinators.
"""

from upload.controllers.upload_handoff import UploadHandoff

__all__ = [
    "UploadHandoff",
]
