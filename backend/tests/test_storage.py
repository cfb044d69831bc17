from pathlib import Path

import boto3
import pytest
from botocore.stub import Stubber

from student_portal.config import Settings
from student_portal.exceptions import UploadFailure, ValidationError
from student_portal.services.storage_service import (
    LocalStorage,
    S3Storage,
    build_storage,
    object_key,
    safe_filename,
)


def test_object_key_layout():
    assert object_key("user-1", "req-9", "passport", "scan.pdf") == "user-1/req-9/passport/scan.pdf"


@pytest.mark.parametrize("raw, expected", [
    ("scan.pdf", "scan.pdf"),
    ("../../etc/passwd", "passwd"),
    ("C:\\Users\\me\\my scan.pdf", "my_scan.pdf"),
    ("", "file"),
    (None, "file"),
    ("جواز.pdf", "جواز.pdf"),
])
def test_safe_filename(raw, expected):
    assert safe_filename(raw) == expected


def test_local_upload_writes_bytes(storage):
    key = storage.upload("u/r/passport/scan.pdf", b"%PDF-data", "application/pdf")

    assert key == "u/r/passport/scan.pdf"
    assert (storage.root / key).read_bytes() == b"%PDF-data"


def test_local_upload_refuses_to_overwrite(storage):
    storage.upload("u/r/passport/scan.pdf", b"first", "application/pdf")

    with pytest.raises(UploadFailure):
        storage.upload("u/r/passport/scan.pdf", b"second", "application/pdf")

    assert (storage.root / "u/r/passport/scan.pdf").read_bytes() == b"first"


def test_local_delete(storage):
    storage.upload("u/r/passport/scan.pdf", b"data", "application/pdf")
    storage.delete("u/r/passport/scan.pdf")

    assert not (storage.root / "u/r/passport/scan.pdf").exists()
    storage.delete("u/r/passport/scan.pdf")


def test_local_rejects_keys_outside_root(storage):
    with pytest.raises(ValidationError):
        storage.upload("../outside.pdf", b"data", "application/pdf")


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


def test_s3_upload_puts_object(s3_client):
    storage = S3Storage("files", client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_response(
            "put_object",
            {},
            {
                "Bucket": "files",
                "Key": "u/r/passport/scan.pdf",
                "Body": b"%PDF-data",
                "ContentType": "application/pdf",
                "CacheControl": "max-age=3600",
            },
        )
        key = storage.upload("u/r/passport/scan.pdf", b"%PDF-data", "application/pdf")
        stubber.assert_no_pending_responses()

    assert key == "u/r/passport/scan.pdf"


def test_s3_too_large_reports_file_size(s3_client):
    storage = S3Storage("files", client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_client_error(
            "put_object",
            service_error_code="EntityTooLarge",
            service_message="Your proposed upload exceeds the maximum allowed size",
            http_status_code=400,
        )
        with pytest.raises(UploadFailure) as exc_info:
            storage.upload("u/r/passport/scan.pdf", b"x" * 2048, "application/pdf")

    assert "2048 bytes" in exc_info.value.message
    assert exc_info.value.details["size_bytes"] == 2048


def test_s3_other_errors_are_upload_failures(s3_client):
    storage = S3Storage("files", client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("put_object", service_error_code="AccessDenied", service_message="Access Denied", http_status_code=403)
        with pytest.raises(UploadFailure) as exc_info:
            storage.upload("u/r/passport/scan.pdf", b"data", "application/pdf")

    assert "Access Denied" in exc_info.value.message


def test_s3_delete(s3_client):
    storage = S3Storage("files", client=s3_client)
    with Stubber(s3_client) as stubber:
        stubber.add_response("delete_object", {}, {"Bucket": "files", "Key": "u/r/passport/scan.pdf"})
        storage.delete("u/r/passport/scan.pdf")
        stubber.assert_no_pending_responses()


def test_build_storage_picks_backend(tmp_path):
    local = build_storage(Settings(STORAGE_BACKEND="local", UPLOAD_DIR=tmp_path))
    s3 = build_storage(Settings(STORAGE_BACKEND="s3", S3_BUCKET_NAME="portal-files"))

    assert isinstance(local, LocalStorage)
    assert isinstance(s3, S3Storage)
    assert s3.describe() == {"backend": "s3", "bucket": "portal-files"}


def test_build_storage_rejects_unknown_backend():
    with pytest.raises(ValueError):
        build_storage(Settings(STORAGE_BACKEND="ftp"))


def test_local_delete_failure_is_upload_failure(storage, monkeypatch):
    storage.upload("u/r/passport/scan.pdf", b"data", "application/pdf")

    def denied_unlink(self, missing_ok=False):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "unlink", denied_unlink)

    with pytest.raises(UploadFailure) as exc_info:
        storage.delete("u/r/passport/scan.pdf")

    assert exc_info.value.details["key"] == "u/r/passport/scan.pdf"
