"""
Tests for credential upload, listing and removal.
"""

import io
import os

import pytest
from fastapi import UploadFile
from sqlalchemy import select

from src.config import settings
from src.errors import StoreFailure
from src.models import Credential, ReviewStatus
from src.uploads import discard_on_error, save_upload
from src.verification import get_verification_record, init_verification
from tests.conftest import pdf_upload


class TestCredentialUpload:
    async def test_upload_creates_pending_credential(self, client, db, professional_account):
        response = await client.post(
            "/credentials/upload",
            data={"userId": str(professional_account.id), "name": "Plumbing licence"},
            files=pdf_upload(),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        credential = data["credential"]
        assert credential["status"] == ReviewStatus.PENDING
        assert credential["name"] == "Plumbing licence"
        assert credential["file_path"].startswith("/uploads/")
        assert credential["file_path"].endswith(".pdf")

        stored = os.path.join(str(settings.UPLOAD_DIR), os.path.basename(credential["file_path"]))
        assert os.path.exists(stored)

    async def test_upload_without_record_does_not_create_one(self, client, db, professional_account):
        await client.post(
            "/credentials/upload",
            data={"userId": str(professional_account.id)},
            files=pdf_upload(),
        )
        assert await get_verification_record(db, professional_account.id) is None

    async def test_upload_rejects_unsupported_extension(self, client, db, professional_account):
        response = await client.post(
            "/credentials/upload",
            data={"userId": str(professional_account.id)},
            files=pdf_upload(filename="script.sh"),
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

        result = await db.execute(select(Credential))
        assert result.scalars().all() == []

    async def test_upload_rejects_oversized_file(self, client, professional_account):
        limit = settings.MAX_FILE_SIZE_MB * 1024 * 1024
        response = await client.post(
            "/credentials/upload",
            data={"userId": str(professional_account.id)},
            files=pdf_upload(content=b"0" * (limit + 1)),
        )
        assert response.status_code == 400

    async def test_upload_unknown_account(self, client):
        before = set(os.listdir(settings.UPLOAD_DIR))
        response = await client.post(
            "/credentials/upload",
            data={"userId": "9999"},
            files=pdf_upload(),
        )
        assert response.status_code == 404
        assert set(os.listdir(settings.UPLOAD_DIR)) == before


class TestCredentialListing:
    async def test_list_newest_first(self, client, professional_account):
        ids = []
        for name in ("First", "Second", "Third"):
            response = await client.post(
                "/credentials/upload",
                data={"userId": str(professional_account.id), "name": name},
                files=pdf_upload(),
            )
            ids.append(response.json()["credential"]["id"])

        response = await client.get(f"/credentials/{professional_account.id}")
        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == list(reversed(ids))

    async def test_list_is_per_account(self, client, professional_account, make_account):
        await client.post(
            "/credentials/upload",
            data={"userId": str(professional_account.id)},
            files=pdf_upload(),
        )
        other = await make_account()
        response = await client.get(f"/credentials/{other.id}")
        assert response.json() == []

    async def test_verification_credentials_view(self, client, professional_account):
        upload = await client.post(
            "/credentials/upload",
            data={"userId": str(professional_account.id)},
            files=pdf_upload(),
        )
        credential = upload.json()["credential"]

        response = await client.get(f"/verification/credentials/{professional_account.id}")
        assert response.json() == [{
            "id": credential["id"],
            "file_path": credential["file_path"],
            "status": ReviewStatus.PENDING,
        }]


class TestCredentialRemoval:
    async def test_delete_unknown_credential(self, client):
        response = await client.delete("/credentials/9999")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Credential not found"}

    async def test_delete_reaggregates(self, client, db, professional_account):
        record, _ = await init_verification(db, professional_account.id)
        record.credentials_status = ReviewStatus.FAILED
        record.overall_status = ReviewStatus.FAILED
        db.add(Credential(
            user_id=professional_account.id,
            file_path="/uploads/bad.pdf",
            name="Rejected cert",
            status=ReviewStatus.FAILED,
        ))
        await db.commit()
        result = await db.execute(select(Credential))
        credential = result.scalar_one()

        response = await client.delete(f"/credentials/{credential.id}")
        assert response.status_code == 200
        assert response.json()["success"] is True

        record = await get_verification_record(db, professional_account.id)
        assert record.credentials_status == ReviewStatus.PENDING
        assert record.overall_status == ReviewStatus.PENDING

        listing = await client.get(f"/credentials/{professional_account.id}")
        assert listing.json() == []


class TestUploadCleanup:
    async def test_discard_on_error_removes_file(self):
        path = await save_upload(UploadFile(io.BytesIO(b"%PDF"), filename="licence.pdf"))
        stored = os.path.join(str(settings.UPLOAD_DIR), os.path.basename(path))
        assert os.path.exists(stored)

        with pytest.raises(StoreFailure):
            async with discard_on_error(path, None):
                raise StoreFailure()
        assert not os.path.exists(stored)

    async def test_discard_on_error_keeps_file_on_success(self):
        path = await save_upload(UploadFile(io.BytesIO(b"%PDF"), filename="licence.pdf"))
        async with discard_on_error(path):
            pass
        assert os.path.exists(os.path.join(str(settings.UPLOAD_DIR), os.path.basename(path)))
