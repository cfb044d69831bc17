# student_portal/services/upload_policy.py
from typing import Optional

from ..config import settings as default_settings
from ..exceptions import ValidationError
from .storage_service import format_size


class UploadPolicy:
    """Allowed content types and the single size ceiling for every upload"""

    def __init__(self, max_size_bytes: int, allowed_content_types):
        self.max_size_bytes = max_size_bytes
        self.allowed_content_types = tuple(allowed_content_types)

    @classmethod
    def from_settings(cls, settings=None) -> "UploadPolicy":
        settings = settings or default_settings
        return cls(settings.MAX_UPLOAD_SIZE_BYTES, settings.ALLOWED_UPLOAD_CONTENT_TYPES)

    def validate(self, filename: str, content_type: Optional[str], size_bytes: int) -> None:
        """Raise ValidationError when the file is outside policy"""
        details = {
            "filename": filename,
            "content_type": content_type,
            "size_bytes": size_bytes,
            "max_size_bytes": self.max_size_bytes,
        }

        if size_bytes > self.max_size_bytes:
            raise ValidationError(
                f"File '{filename}' is too large. "
                f"Maximum allowed: {format_size(self.max_size_bytes)}. "
                f"File size: {format_size(size_bytes)}",
                details=details,
            )

        if size_bytes == 0:
            raise ValidationError(f"File '{filename}' is empty", details=details)

        normalized = (content_type or "").split(";")[0].strip().lower()
        if normalized not in self.allowed_content_types:
            raise ValidationError(
                f"File '{filename}' has type '{content_type}'. "
                f"Allowed types: {', '.join(self.allowed_content_types)}",
                details=details,
            )
