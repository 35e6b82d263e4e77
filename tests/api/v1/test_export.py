"""
Tests for GET /api/v1/admin/export/bulk.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import FinalTags, Groups, Images, ImageTags, Tags


@pytest.mark.api
class TestBulkExport:
    """Tests for the bulk export."""

    async def test_empty_database(self, client: AsyncClient, admin_headers: dict):
        response = await client.get("/api/v1/admin/export/bulk", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {}

    async def test_group_without_images(self, client: AsyncClient, admin_headers: dict, group: Groups):
        response = await client.get("/api/v1/admin/export/bulk", headers=admin_headers)

        assert response.json()["data"] == {str(group.id): {}}

    async def test_image_entry(
        self,
        client: AsyncClient,
        admin_headers: dict,
        db_session: AsyncSession,
        group: Groups,
        group_tags: list[Tags],
        image: Images,
        make_labeler,
    ):
        cat, dog, _ = group_tags
        first = await make_labeler("first", group_ids=[group.id])
        second = await make_labeler("second", group_ids=[group.id])
        db_session.add_all(
            [
                ImageTags(image_id=image.id, labeler_id=first.id, tag_id=cat.id),
                ImageTags(image_id=image.id, labeler_id=second.id, tag_id=cat.id),
                ImageTags(image_id=image.id, labeler_id=second.id, tag_id=dog.id),
                FinalTags(image_id=image.id, tag_id=dog.id, is_admin_override=True),
            ]
        )
        await db_session.commit()

        response = await client.get("/api/v1/admin/export/bulk", headers=admin_headers)

        assert response.status_code == 200
        entry = response.json()["data"][str(group.id)][str(image.id)]
        assert entry["filename"] == "photo.png"
        assert entry["filetype"] == "png"
        assert entry["base64"] == image.base64_data
        assert entry["uploaded_at"].endswith("Z")
        assert entry["final_tags"] == ["dog"]
        assert entry["has_admin_override"] is True
        assert [(s["tag_name"], s["count"], s["percentage"]) for s in entry["tag_statistics"]] == [
            ("cat", 2, 100.0),
            ("dog", 1, 50.0),
            ("outdoor", 0, 0.0),
        ]
        assert all(s["total_labelers"] == 2 for s in entry["tag_statistics"])

    async def test_images_grouped_by_group(
        self, client: AsyncClient, admin_headers: dict, db_session: AsyncSession, group: Groups, image: Images
    ):
        other = Groups(name="Vehicles")
        db_session.add(other)
        await db_session.flush()
        car = Images(filename="car.png", filetype="png", base64_data=image.base64_data, group_id=other.id)  # type: ignore[arg-type]
        db_session.add(car)
        await db_session.commit()

        data = (await client.get("/api/v1/admin/export/bulk", headers=admin_headers)).json()["data"]

        assert list(data[str(group.id)]) == [str(image.id)]
        assert list(data[str(other.id)]) == [str(car.id)]
        assert data[str(other.id)][str(car.id)]["tag_statistics"] == []
        assert data[str(other.id)][str(car.id)]["has_admin_override"] is False

    async def test_requires_admin(self, client: AsyncClient, labeler_headers: dict):
        response = await client.get("/api/v1/admin/export/bulk", headers=labeler_headers)

        assert response.status_code == 403
