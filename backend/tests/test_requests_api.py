import inspect

import pytest
from httpx import AsyncClient

from conftest import PDF_BYTES, TEST_MAX_UPLOAD_SIZE
from student_portal.database.models.request import Request
from student_portal.database.models.uploaded_file import UploadedFile
from student_portal.routers import requests as requests_router


def pdf_part(name, data=PDF_BYTES):
    return (name, data, "application/pdf")


@pytest.mark.asyncio
async def test_submit_requires_login(client: AsyncClient, db_session):
    response = await client.post("/requests", data={"service_type": "passport_renewal"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_REQUIRED"
    assert db_session.query(Request).count() == 0


@pytest.mark.asyncio
async def test_submit_passport_renewal(client: AsyncClient, auth_headers, db_session):
    response = await client.post(
        "/requests",
        data={"service_type": "passport_renewal", "university_name": "University of Mosul", "major": ""},
        files={"file": pdf_part("passport.pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["request"]["status"] == "submitted"
    assert data["request"]["major"] is None
    assert data["request_number"] == data["request"]["request_number"]
    assert [f["file_type"] for f in data["files"]] == ["passport"]
    assert db_session.query(UploadedFile).count() == 1


@pytest.mark.asyncio
async def test_submit_partial_failure_reports_request_number(client: AsyncClient, auth_headers, db_session):
    big = b"%PDF" + b"x" * (TEST_MAX_UPLOAD_SIZE * 2)

    response = await client.post(
        "/requests",
        data={"service_type": "visa_request"},
        files={"passport_file": pdf_part("passport.pdf"), "visa_file": pdf_part("visa.pdf", big)},
        headers=auth_headers,
    )

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "visa.pdf" in error["message"]
    assert str(len(big)) in error["message"]

    request = db_session.query(Request).one()
    assert error["details"]["request_number"] == request.request_number
    assert [f.file_type for f in db_session.query(UploadedFile).all()] == ["passport"]


@pytest.mark.asyncio
async def test_submit_rejects_non_pdf(client: AsyncClient, auth_headers, db_session):
    response = await client.post(
        "/requests",
        data={"service_type": "certificate_authentication"},
        files={"certificate_file": ("cert.png", b"\x89PNG....", "image/png")},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert db_session.query(UploadedFile).count() == 0


@pytest.mark.asyncio
async def test_generic_file_and_same_slot_conflict(client: AsyncClient, auth_headers):
    response = await client.post(
        "/requests",
        data={"service_type": "passport_renewal"},
        files={"file": pdf_part("a.pdf"), "passport_file": pdf_part("b.pdf")},
        headers=auth_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_submit_then_track(client: AsyncClient, auth_headers):
    submitted = await client.post(
        "/requests",
        data={"service_type": "ministry_authentication"},
        headers=auth_headers,
    )
    request = submitted.json()["request"]

    response = await client.get(
        "/tracking",
        params={"request_number": request["request_number"], "submission_date": request["submission_date"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "submitted"
    assert len(data["timeline"]) == 5
    assert data["timeline"][0]["complete"] is True
    assert not any(step["complete"] for step in data["timeline"][1:])


@pytest.mark.asyncio
async def test_tracking_not_found(client: AsyncClient):
    response = await client.get("/tracking", params={"request_number": "REQ-2025-0001", "submission_date": "2025-01-01"})

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_my_requests_and_files(client: AsyncClient, auth_headers):
    submitted = await client.post(
        "/requests",
        data={"service_type": "passport_renewal"},
        files={"passport_file": pdf_part("passport.pdf")},
        headers=auth_headers,
    )
    request_id = submitted.json()["request"]["id"]

    mine = await client.get("/requests/mine", headers=auth_headers)
    files = await client.get(f"/requests/{request_id}/files", headers=auth_headers)

    assert [r["id"] for r in mine.json()] == [request_id]
    assert [f["original_filename"] for f in files.json()] == ["passport.pdf"]


@pytest.mark.asyncio
async def test_other_students_files_are_hidden(client: AsyncClient, auth_headers, db_session):
    from conftest import make_request, make_user

    other = make_user(db_session)
    request = make_request(db_session, other)

    response = await client.get(f"/requests/{request.id}/files", headers=auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_bad_token_is_auth_required(client: AsyncClient):
    response = await client.get("/requests/mine", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_submit_endpoint_runs_in_threadpool():
    # Plain def: FastAPI runs it in the threadpool
    assert not inspect.iscoroutinefunction(requests_router.submit_request)


@pytest.mark.asyncio
async def test_submit_oversized_file_reports_size(client: AsyncClient, auth_headers, db_session):
    big = b"%PDF" + b"x" * (TEST_MAX_UPLOAD_SIZE * 3)

    response = await client.post(
        "/requests",
        data={"service_type": "passport_renewal"},
        files={"file": pdf_part("big.pdf", big)},
        headers=auth_headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"]["size_bytes"] == len(big)
    assert db_session.query(UploadedFile).count() == 0
