# student_portal/services/storage_service.py
"""
Object storage for request attachments.

Objects are keyed ``{owner_id}/{request_id}/{file_type}/{filename}``.
Two backends: the local filesystem under UPLOAD_DIR and an S3-compatible
bucket (AWS S3 or MinIO). Neither retries; a failed write raises UploadFailure.
"""
import re
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import settings as default_settings
from ..exceptions import UploadFailure, ValidationError
from ..logging_config import logger

_UNSAFE_CHARS = re.compile(r"[^\w.\-]+", re.UNICODE)
_TOO_LARGE_CODES = {"EntityTooLarge", "413", "RequestEntityTooLarge"}


def safe_filename(filename: Optional[str]) -> str:
    """Strip directories and odd characters from a client-supplied name"""
    name = Path((filename or "").replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "file"


def object_key(owner_id: str, request_id: str, file_type: str, filename: str) -> str:
    return f"{owner_id}/{request_id}/{file_type}/{safe_filename(filename)}"


def format_size(size_bytes: int) -> str:
    return f"{size_bytes / 1024 / 1024:.2f} MB ({size_bytes} bytes)"


class StorageBackend:
    name = "base"

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under key, return the stored path"""
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def describe(self) -> dict:
        return {"backend": self.name}


class LocalStorage(StorageBackend):
    name = "local"

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ValidationError("Invalid storage path", details={"key": key})
        return path

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path_for(key)
        if path.exists():
            raise UploadFailure(
                f"A file already exists at {key}",
                details={"key": key, "size_bytes": len(data)},
            )
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("wb") as f:
                f.write(data)
        except OSError as e:
            logger.error(f"[Storage] Local write failed for {key}: {e}")
            raise UploadFailure(
                f"Failed to store file ({format_size(len(data))}): {e}",
                details={"key": key, "size_bytes": len(data)},
            ) from e
        return key

    def delete(self, key: str) -> None:
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"[Storage] Local delete failed for {key}: {e}")
            raise UploadFailure(f"Failed to delete {key}: {e}", details={"key": key}) from e

    def describe(self) -> dict:
        return {"backend": self.name, "root": str(self.root)}


class S3Storage(StorageBackend):
    name = "s3"

    def __init__(self, bucket: str, client=None, settings=None):
        self.bucket = bucket
        self._client = client
        self._settings = settings or default_settings

    def _get_client(self):
        """Lazy client with explicit timeouts and a single attempt per call"""
        if self._client is None:
            s = self._settings
            kwargs = {
                "region_name": s.AWS_REGION,
                "config": Config(
                    signature_version="s3v4",
                    connect_timeout=s.STORAGE_CONNECT_TIMEOUT,
                    read_timeout=s.STORAGE_READ_TIMEOUT,
                    retries={"total_max_attempts": 1},
                    s3={"addressing_style": "path"},
                ),
            }
            if s.S3_ENDPOINT_URL:
                kwargs["endpoint_url"] = s.S3_ENDPOINT_URL
            if s.AWS_ACCESS_KEY_ID and s.AWS_SECRET_ACCESS_KEY:
                kwargs["aws_access_key_id"] = s.AWS_ACCESS_KEY_ID
                kwargs["aws_secret_access_key"] = s.AWS_SECRET_ACCESS_KEY
            self._client = boto3.client("s3", **kwargs)
        return self._client

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        size = len(data)
        try:
            self._get_client().put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl="max-age=3600",
            )
        except ClientError as e:
            error = e.response.get("Error", {})
            code = str(error.get("Code", ""))
            status = str(e.response.get("ResponseMetadata", {}).get("HTTPStatusCode", ""))
            logger.error(f"[Storage] S3 put_object failed for {key}: {code} {error.get('Message', '')}")
            if code in _TOO_LARGE_CODES or status == "413":
                raise UploadFailure(
                    f"File is larger than the storage accepts. File size: {format_size(size)}",
                    details={"key": key, "size_bytes": size},
                ) from e
            raise UploadFailure(
                f"Failed to upload file ({format_size(size)}): {error.get('Message') or code}",
                details={"key": key, "size_bytes": size},
            ) from e
        except BotoCoreError as e:
            logger.error(f"[Storage] S3 connection failed for {key}: {e}")
            raise UploadFailure(
                f"Failed to upload file ({format_size(size)}): {e}",
                details={"key": key, "size_bytes": size},
            ) from e
        return key

    def delete(self, key: str) -> None:
        try:
            self._get_client().delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise UploadFailure(f"Failed to delete {key}: {e}", details={"key": key}) from e

    def describe(self) -> dict:
        return {"backend": self.name, "bucket": self.bucket}


def build_storage(settings=None) -> StorageBackend:
    settings = settings or default_settings
    if settings.STORAGE_BACKEND == "s3":
        return S3Storage(settings.S3_BUCKET_NAME, settings=settings)
    if settings.STORAGE_BACKEND == "local":
        return LocalStorage(settings.UPLOAD_DIR)
    raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND}")


_storage: Optional[StorageBackend] = None


def get_storage() -> StorageBackend:
    global _storage
    if _storage is None:
        _storage = build_storage()
        logger.info(f"[Storage] Using {_storage.describe()}")
    return _storage
