# tests/integration/test_briefcase.py
"""Integration tests for briefcase folders and documents."""

from urllib.parse import quote
from uuid import uuid4

import pytest
from httpx import AsyncClient


async def upload(client: AsyncClient, headers, name="plan.txt", data=b"business plan", **form):
    response = await client.post(
        "/api/v1/briefcase/documents",
        headers=headers,
        files={"file": (name, data, "text/plain")},
        data=form,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestFolders:

    async def test_default_folder_created_on_first_access(self, async_client: AsyncClient, auth_headers):
        first = await async_client.get("/api/v1/briefcase/folders", headers=auth_headers)
        second = await async_client.get("/api/v1/briefcase/folders", headers=auth_headers)

        assert first.status_code == 200
        assert len(first.json()) == 1
        assert first.json()[0]["is_default"] is True
        assert first.json()[0]["name"] == "My Briefcase"
        assert second.json() == first.json()

    async def test_default_folder_cannot_be_deleted(self, async_client: AsyncClient, auth_headers):
        (default,) = (await async_client.get("/api/v1/briefcase/folders", headers=auth_headers)).json()

        response = await async_client.delete(f"/api/v1/briefcase/folders/{default['id']}", headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    async def test_delete_folder_moves_documents(self, async_client: AsyncClient, auth_headers):
        folder = (
            await async_client.post("/api/v1/briefcase/folders", headers=auth_headers, json={"name": "Contracts"})
        ).json()
        document = await upload(async_client, auth_headers, folder_id=folder["id"])

        response = await async_client.delete(f"/api/v1/briefcase/folders/{folder['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "moved_documents": 1}
        moved = (await async_client.get(f"/api/v1/briefcase/documents/{document['id']}", headers=auth_headers)).json()
        assert moved["folder_id"] != folder["id"]

    async def test_folder_cannot_be_its_own_parent(self, async_client: AsyncClient, auth_headers):
        folder = (
            await async_client.post("/api/v1/briefcase/folders", headers=auth_headers, json={"name": "Loop"})
        ).json()

        response = await async_client.patch(
            f"/api/v1/briefcase/folders/{folder['id']}", headers=auth_headers, json={"parent_id": folder["id"]}
        )

        assert response.status_code == 400


@pytest.mark.integration
class TestDocuments:

    async def test_upload_and_download(self, async_client: AsyncClient, auth_headers):
        document = await upload(
            async_client,
            auth_headers,
            name="pitch deck.txt",
            description="Seed round",
            category="fundraising",
            tags="investors, seed ,",
        )

        assert document["file_size"] == len(b"business plan")
        assert document["mime_type"] == "text/plain"
        assert document["tags"] == ["investors", "seed"]
        assert document["download_count"] == 0

        response = await async_client.get(
            f"/api/v1/briefcase/documents/{document['id']}/download", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.content == b"business plan"
        assert response.headers["content-disposition"] == (
            f"attachment; filename*=UTF-8''{quote('pitch deck.txt')}"
        )

        fetched = await async_client.get(f"/api/v1/briefcase/documents/{document['id']}", headers=auth_headers)
        assert fetched.json()["download_count"] == 1

    async def test_empty_upload_rejected(self, async_client: AsyncClient, auth_headers):
        response = await async_client.post(
            "/api/v1/briefcase/documents",
            headers=auth_headers,
            files={"file": ("empty.txt", b"", "text/plain")},
        )

        assert response.status_code == 400

    async def test_oversized_upload_rejected(self, async_client: AsyncClient, auth_headers, monkeypatch, test_settings):
        monkeypatch.setattr(test_settings, "briefcase_max_upload_bytes", 4)

        response = await async_client.post(
            "/api/v1/briefcase/documents",
            headers=auth_headers,
            files={"file": ("big.txt", b"too large", "text/plain")},
        )

        assert response.status_code == 413
        assert response.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"

    async def test_list_filters(self, async_client: AsyncClient, auth_headers):
        await upload(async_client, auth_headers, name="invoice.txt", category="finance", tags="q1")
        await upload(async_client, auth_headers, name="logo.txt", category="brand", tags="q1,design")
        await upload(async_client, auth_headers, name="notes.txt", description="Invoice follow-up")

        by_tag = await async_client.get("/api/v1/briefcase/documents", headers=auth_headers, params={"tag": "q1"})
        by_category = await async_client.get(
            "/api/v1/briefcase/documents", headers=auth_headers, params={"category": "brand"}
        )
        by_search = await async_client.get(
            "/api/v1/briefcase/documents", headers=auth_headers, params={"search": "invoice"}
        )
        by_name = await async_client.get(
            "/api/v1/briefcase/documents", headers=auth_headers, params={"sort_by": "name", "order": "asc"}
        )

        assert by_tag.json()["pagination"]["total"] == 2
        assert [d["name"] for d in by_category.json()["items"]] == ["logo.txt"]
        assert {d["name"] for d in by_search.json()["items"]} == {"invoice.txt", "notes.txt"}
        assert [d["name"] for d in by_name.json()["items"]] == ["invoice.txt", "logo.txt", "notes.txt"]

    async def test_update_and_delete(self, async_client: AsyncClient, auth_headers):
        document = await upload(async_client, auth_headers)

        updated = await async_client.patch(
            f"/api/v1/briefcase/documents/{document['id']}",
            headers=auth_headers,
            json={"name": "Plan v2", "is_favorite": True},
        )
        assert updated.json()["name"] == "Plan v2"
        assert updated.json()["is_favorite"] is True

        deleted = await async_client.delete(f"/api/v1/briefcase/documents/{document['id']}", headers=auth_headers)
        assert deleted.status_code == 204
        missing = await async_client.get(
            f"/api/v1/briefcase/documents/{document['id']}/download", headers=auth_headers
        )
        assert missing.status_code == 404

    async def test_other_users_document_hidden(self, async_client: AsyncClient, auth_headers, other_auth_headers):
        document = await upload(async_client, other_auth_headers)

        response = await async_client.get(f"/api/v1/briefcase/documents/{document['id']}", headers=auth_headers)

        assert response.status_code == 404


@pytest.mark.integration
class TestBulkOperations:

    async def test_tag_and_favorite(self, async_client: AsyncClient, auth_headers):
        docs = [await upload(async_client, auth_headers, name=f"doc{i}.txt", tags="old") for i in range(2)]
        ids = [d["id"] for d in docs]

        tagged = await async_client.post(
            "/api/v1/briefcase/bulk",
            headers=auth_headers,
            json={"action": "tag", "document_ids": ids, "tags": ["new", "old"]},
        )
        favorited = await async_client.post(
            "/api/v1/briefcase/bulk",
            headers=auth_headers,
            json={"action": "favorite", "document_ids": ids, "favorite": True},
        )

        assert tagged.json() == {"success": True, "processed": 2, "failed": 0, "errors": []}
        assert favorited.json()["processed"] == 2
        listed = await async_client.get(
            "/api/v1/briefcase/documents", headers=auth_headers, params={"favorite": True}
        )
        assert all(d["tags"] == ["old", "new"] for d in listed.json()["items"])
        assert listed.json()["pagination"]["total"] == 2

    async def test_copy_duplicates_content(self, async_client: AsyncClient, auth_headers):
        document = await upload(async_client, auth_headers, data=b"original bytes")

        response = await async_client.post(
            "/api/v1/briefcase/bulk",
            headers=auth_headers,
            json={"action": "copy", "document_ids": [document["id"]], "folder_id": document["folder_id"]},
        )

        assert response.json()["processed"] == 1
        listed = (await async_client.get("/api/v1/briefcase/documents", headers=auth_headers)).json()
        copy = next(d for d in listed["items"] if d["name"] == "plan.txt (Copy)")
        downloaded = await async_client.get(f"/api/v1/briefcase/documents/{copy['id']}/download", headers=auth_headers)
        assert downloaded.content == b"original bytes"

    async def test_copy_without_folder_stays_in_source_folder(self, async_client: AsyncClient, auth_headers):
        folder = (
            await async_client.post("/api/v1/briefcase/folders", headers=auth_headers, json={"name": "Contracts"})
        ).json()
        document = await upload(async_client, auth_headers, name="nda.txt", folder_id=folder["id"])

        response = await async_client.post(
            "/api/v1/briefcase/bulk",
            headers=auth_headers,
            json={"action": "copy", "document_ids": [document["id"]]},
        )

        assert response.status_code == 200
        assert response.json()["processed"] == 1
        listed = (
            await async_client.get(
                "/api/v1/briefcase/documents", headers=auth_headers, params={"folder_id": folder["id"]}
            )
        ).json()
        assert sorted(d["name"] for d in listed["items"]) == ["nda.txt", "nda.txt (Copy)"]

    async def test_move_requires_folder(self, async_client: AsyncClient, auth_headers):
        document = await upload(async_client, auth_headers)

        response = await async_client.post(
            "/api/v1/briefcase/bulk",
            headers=auth_headers,
            json={"action": "move", "document_ids": [document["id"]]},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_foreign_ids_reject_whole_request(
        self, async_client: AsyncClient, auth_headers, other_auth_headers
    ):
        mine = await upload(async_client, auth_headers)
        theirs = await upload(async_client, other_auth_headers)

        response = await async_client.post(
            "/api/v1/briefcase/bulk",
            headers=auth_headers,
            json={"action": "delete", "document_ids": [mine["id"], theirs["id"], str(uuid4())]},
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "RESOURCE_ACCESS_DENIED"
        still_there = await async_client.get(f"/api/v1/briefcase/documents/{mine['id']}", headers=auth_headers)
        assert still_there.status_code == 200
