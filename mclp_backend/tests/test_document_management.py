"""
Integration tests for the documents API.

Tests the upload/download/delete lifecycle and that records and blobs
never get out of step.
"""

import asyncio
import io
import pytest
from unittest.mock import AsyncMock
from fastapi import UploadFile
from starlette.datastructures import Headers

from mclp_backend.app.core.config import settings
from mclp_backend.app.core.exceptions import StoreError
from mclp_backend.app.services.blob_storage import LocalBlobStorage
from mclp_backend.app.services.documents import DocumentService
from mclp_backend.app.services.repository import OwnedRepository

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


def pdf_upload(name="sale-deed.pdf", content=PDF_BYTES, mime="application/pdf"):
    return {"file": (name, content, mime)}


def blobs_in(upload_dir):
    return sorted(p.name for p in upload_dir.iterdir())


@pytest.fixture
async def uploaded_document(client, owner_a_headers):
    response = await client.post(
        "/api/documents/upload",
        files=pdf_upload(),
        data={"category": "govt-docs"},
        headers=owner_a_headers
    )
    assert response.status_code == 201
    return response.json()["data"]


# TEST 1: Upload
@pytest.mark.asyncio
async def test_upload_success(client, owner_a_headers, upload_dir):
    response = await client.post(
        "/api/documents/upload",
        files=pdf_upload(),
        data={"category": "company"},
        headers=owner_a_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Document uploaded successfully"
    data = body["data"]
    assert data["ownerId"] == "user-a"
    assert data["originalName"] == "sale-deed.pdf"
    assert data["category"] == "company"
    assert data["sizeBytes"] == len(PDF_BYTES)
    assert data["mimeType"] == "application/pdf"
    assert data["storedName"] != "sale-deed.pdf"
    assert data["storedName"].endswith(".pdf")
    assert blobs_in(upload_dir) == [data["storedName"]]
    assert (upload_dir / data["storedName"]).read_bytes() == PDF_BYTES


@pytest.mark.asyncio
async def test_upload_without_file(client, owner_a_headers, upload_dir):
    response = await client.post(
        "/api/documents/upload",
        data={"category": "company"},
        headers=owner_a_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Please upload a file"
    assert response.json()["details"]["field"] == "file"
    assert blobs_in(upload_dir) == []


@pytest.mark.asyncio
async def test_upload_without_category_leaves_no_blob(client, owner_a_headers, upload_dir):
    response = await client.post("/api/documents/upload", files=pdf_upload(), headers=owner_a_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Category is required"
    assert blobs_in(upload_dir) == []

    response = await client.get("/api/documents", headers=owner_a_headers)
    assert response.json()["count"] == 0


@pytest.mark.asyncio
async def test_upload_with_unknown_category_leaves_no_blob(client, owner_a_headers, upload_dir):
    response = await client.post(
        "/api/documents/upload",
        files=pdf_upload(),
        data={"category": "personal"},
        headers=owner_a_headers
    )

    assert response.status_code == 400
    assert response.json()["details"]["field"] == "category"
    assert response.json()["details"]["reason"] == "enum"
    assert blobs_in(upload_dir) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("name,mime", [
    ("notes.txt", "text/plain"),
    ("setup.exe", "application/octet-stream"),
    ("report.pdf", "text/html"),
    ("scan.tiff", "image/tiff"),
])
async def test_upload_rejects_disallowed_types(client, owner_a_headers, upload_dir, name, mime):
    response = await client.post(
        "/api/documents/upload",
        files=pdf_upload(name=name, mime=mime),
        data={"category": "templates"},
        headers=owner_a_headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Only PDF, images, and office documents are allowed"
    assert response.json()["details"]["reason"] == "type"
    assert blobs_in(upload_dir) == []


@pytest.mark.asyncio
async def test_upload_rejects_oversized_file(client, owner_a_headers, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "max_file_size", 16)

    response = await client.post(
        "/api/documents/upload",
        files=pdf_upload(),
        data={"category": "company"},
        headers=owner_a_headers
    )

    assert response.status_code == 400
    assert response.json()["details"]["field"] == "file"
    assert blobs_in(upload_dir) == []


@pytest.mark.asyncio
async def test_upload_store_failure_removes_blob(client, owner_a_headers, upload_dir, mocker):
    mocker.patch.object(
        OwnedRepository, "create",
        AsyncMock(side_effect=StoreError("Could not create document"))
    )

    response = await client.post(
        "/api/documents/upload",
        files=pdf_upload(),
        data={"category": "company"},
        headers=owner_a_headers
    )

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["error_code"] == "ERR_STORE_001"
    assert blobs_in(upload_dir) == []


# TEST 2: List and get
@pytest.mark.asyncio
async def test_list_documents_by_category(client, owner_a_headers, owner_b_headers):
    for category in ["company", "govt-gos", "company"]:
        await client.post(
            "/api/documents/upload",
            files=pdf_upload(),
            data={"category": category},
            headers=owner_a_headers
        )
    await client.post(
        "/api/documents/upload",
        files=pdf_upload(),
        data={"category": "company"},
        headers=owner_b_headers
    )

    response = await client.get("/api/documents", headers=owner_a_headers)
    assert response.json()["count"] == 3

    response = await client.get("/api/documents", params={"category": "company"}, headers=owner_a_headers)
    assert response.json()["count"] == 2
    assert all(d["category"] == "company" for d in response.json()["data"])


@pytest.mark.asyncio
async def test_get_document_metadata(client, owner_a_headers, uploaded_document):
    response = await client.get(f"/api/documents/{uploaded_document['id']}", headers=owner_a_headers)

    assert response.status_code == 200
    assert response.json()["data"] == uploaded_document


# TEST 3: Download
@pytest.mark.asyncio
async def test_download_returns_original_name_and_content(client, owner_a_headers, uploaded_document):
    response = await client.get(
        f"/api/documents/download/{uploaded_document['id']}",
        headers=owner_a_headers
    )

    assert response.status_code == 200
    assert response.content == PDF_BYTES
    assert response.headers["content-type"].startswith("application/pdf")
    assert "sale-deed.pdf" in response.headers["content-disposition"]


@pytest.mark.asyncio
async def test_download_with_missing_blob(client, owner_a_headers, uploaded_document, upload_dir, mocker):
    (upload_dir / uploaded_document["storedName"]).unlink()
    mock_logger = mocker.patch("mclp_backend.app.services.documents.logger")

    response = await client.get(
        f"/api/documents/download/{uploaded_document['id']}",
        headers=owner_a_headers
    )

    assert response.status_code == 404
    assert response.json()["message"] == "File not found on server"
    mock_logger.warning.assert_called_once()


# TEST 4: Delete
@pytest.mark.asyncio
async def test_delete_removes_record_and_blob(client, owner_a_headers, uploaded_document, upload_dir):
    response = await client.delete(f"/api/documents/{uploaded_document['id']}", headers=owner_a_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Document deleted successfully"
    assert body["warning"] is None
    assert blobs_in(upload_dir) == []

    response = await client.get(f"/api/documents/{uploaded_document['id']}", headers=owner_a_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_reports_blob_removal_failure(client, owner_a_headers, uploaded_document, upload_dir, mocker):
    mocker.patch.object(LocalBlobStorage, "remove", side_effect=PermissionError("read-only filesystem"))

    response = await client.delete(f"/api/documents/{uploaded_document['id']}", headers=owner_a_headers)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["warning"]
    assert blobs_in(upload_dir) == [uploaded_document["storedName"]]

    response = await client.get(f"/api/documents/{uploaded_document['id']}", headers=owner_a_headers)
    assert response.status_code == 404


# TEST 5: Ownership isolation
@pytest.mark.asyncio
async def test_other_owner_cannot_reach_document(
    client, owner_a_headers, owner_b_headers, uploaded_document, upload_dir
):
    document_id = uploaded_document["id"]

    for method, url in [
        ("GET", f"/api/documents/{document_id}"),
        ("GET", f"/api/documents/download/{document_id}"),
        ("DELETE", f"/api/documents/{document_id}"),
    ]:
        response = await client.request(method, url, headers=owner_b_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Document not found"

    assert blobs_in(upload_dir) == [uploaded_document["storedName"]]
    response = await client.get(f"/api/documents/{document_id}", headers=owner_a_headers)
    assert response.status_code == 200


# TEST 6: Cleanup on failure paths
@pytest.mark.asyncio
async def test_upload_cleanup_failure_keeps_original_error(client, owner_a_headers, upload_dir, mocker):
    mocker.patch.object(LocalBlobStorage, "remove", side_effect=PermissionError("read-only filesystem"))
    mock_logger = mocker.patch("mclp_backend.app.services.blob_storage.logger")

    response = await client.post("/api/documents/upload", files=pdf_upload(), headers=owner_a_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Category is required"
    mock_logger.warning.assert_called_once()
    assert len(blobs_in(upload_dir)) == 1


@pytest.mark.asyncio
async def test_upload_write_failure(client, owner_a_headers, upload_dir, mocker):
    mocker.patch(
        "mclp_backend.app.services.blob_storage.open",
        side_effect=OSError("No space left on device"),
        create=True
    )

    response = await client.post(
        "/api/documents/upload",
        files=pdf_upload(),
        data={"category": "company"},
        headers=owner_a_headers
    )

    assert response.status_code == 500
    assert response.json()["error_code"] == "ERR_STORAGE_001"
    assert blobs_in(upload_dir) == []


@pytest.mark.asyncio
async def test_upload_keeps_long_names_within_limit(client, owner_a_headers):
    long_name = "survey-" + "x" * 300 + ".pdf"

    response = await client.post(
        "/api/documents/upload",
        files=pdf_upload(name=long_name),
        data={"category": "company"},
        headers=owner_a_headers
    )

    assert response.status_code == 201
    original_name = response.json()["data"]["originalName"]
    assert len(original_name) == 255
    assert original_name.startswith("survey-xxx")
    assert original_name.endswith(".pdf")


def pdf_upload_file(name="sale-deed.pdf"):
    return UploadFile(
        file=io.BytesIO(PDF_BYTES),
        filename=name,
        headers=Headers({"content-type": "application/pdf"})
    )


@pytest.mark.asyncio
async def test_cancelled_record_save_removes_blob(db_session, blob_storage, upload_dir, mocker):
    mocker.patch.object(OwnedRepository, "create", AsyncMock(side_effect=asyncio.CancelledError()))
    service = DocumentService(
        db_session, blob_storage,
        max_file_size=settings.max_file_size,
        allowed_extensions=settings.allowed_extensions
    )

    with pytest.raises(asyncio.CancelledError):
        await service.upload("user-a", pdf_upload_file(), "company")

    assert blobs_in(upload_dir) == []


@pytest.mark.asyncio
async def test_cancelled_stream_removes_partial_blob(blob_storage, upload_dir):
    upload = pdf_upload_file()
    upload.read = AsyncMock(side_effect=[PDF_BYTES[:8], asyncio.CancelledError()])

    with pytest.raises(asyncio.CancelledError):
        await blob_storage.save(upload, max_bytes=1024)

    assert blobs_in(upload_dir) == []
