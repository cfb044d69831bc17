import pytest

from student_portal.config import Settings
from student_portal.exceptions import ValidationError
from student_portal.services.upload_policy import UploadPolicy


def test_file_within_policy_passes(policy):
    policy.validate("passport.pdf", "application/pdf", 500)


def test_content_type_parameters_are_ignored(policy):
    policy.validate("passport.pdf", "application/pdf; charset=binary", 500)


def test_oversized_file_reports_actual_size(policy):
    with pytest.raises(ValidationError) as exc_info:
        policy.validate("scan.pdf", "application/pdf", 5000)

    assert "5000 bytes" in exc_info.value.message
    assert "scan.pdf" in exc_info.value.message
    assert exc_info.value.details["size_bytes"] == 5000


def test_file_at_ceiling_is_allowed(policy):
    policy.validate("exact.pdf", "application/pdf", policy.max_size_bytes)


def test_wrong_type_rejected(policy):
    with pytest.raises(ValidationError) as exc_info:
        policy.validate("photo.png", "image/png", 100)

    assert "image/png" in exc_info.value.message


def test_empty_file_rejected(policy):
    with pytest.raises(ValidationError):
        policy.validate("empty.pdf", "application/pdf", 0)


def test_policy_comes_from_one_setting():
    settings = Settings(MAX_UPLOAD_SIZE_BYTES=2048, ALLOWED_UPLOAD_CONTENT_TYPES=["application/pdf", "image/jpeg"])
    policy = UploadPolicy.from_settings(settings)

    assert policy.max_size_bytes == 2048
    assert policy.allowed_content_types == ("application/pdf", "image/jpeg")
