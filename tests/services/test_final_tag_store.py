"""
Tests for final tag storage.

These run against the per-test SQLite database and cover replacement,
admin override tracking, auto-generation and failed writes.
"""

import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import FinalTags, Groups, Images, ImageTags, Tags
from app.services.exceptions import FinalTagPersistenceError, PersistenceError
from app.services.final_tags import (
    auto_generate_for_image,
    get_final_tags,
    get_tag_statistics,
    has_admin_override,
    replace_final_tags,
)
from tests.factories import make_png_base64


async def _vote(db: AsyncSession, image_id: int, labeler_id: int, *tag_ids: int) -> None:
    db.add_all(ImageTags(image_id=image_id, labeler_id=labeler_id, tag_id=t) for t in tag_ids)
    await db.commit()


@pytest.mark.unit
class TestReplaceFinalTags:
    """Tests for replace_final_tags and get_final_tags."""

    async def test_replace_then_get_returns_exact_set(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        cat, dog, _ = group_tags
        image_id = image.id

        await replace_final_tags(db_session, image_id, {cat.id, dog.id}, is_admin_override=False)
        final_tags = await get_final_tags(db_session, image_id)

        assert {f.tag_id for f in final_tags} == {cat.id, dog.id}
        assert all(f.is_admin_override is False for f in final_tags)
        assert [f.tag_name for f in final_tags] == ["cat", "dog"]

    async def test_replace_discards_previous_set(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        cat, dog, outdoor = group_tags
        image_id = image.id

        await replace_final_tags(db_session, image_id, [cat.id, dog.id], is_admin_override=False)
        await replace_final_tags(db_session, image_id, [outdoor.id], is_admin_override=True)

        final_tags = await get_final_tags(db_session, image_id)
        assert [f.tag_id for f in final_tags] == [outdoor.id]
        assert final_tags[0].is_admin_override is True

    async def test_batch_shares_timestamp(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        rows = await replace_final_tags(
            db_session, image.id, [t.id for t in group_tags], is_admin_override=False
        )

        assert len({row.created_at for row in rows}) == 1

    async def test_replace_with_empty_list_clears(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        image_id = image.id
        await replace_final_tags(db_session, image_id, [group_tags[0].id], is_admin_override=True)

        await replace_final_tags(db_session, image_id, [], is_admin_override=False)

        assert await get_final_tags(db_session, image_id) == []
        assert await has_admin_override(db_session, image_id) is False

    async def test_duplicates_collapsed(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        cat = group_tags[0]
        image_id = image.id

        await replace_final_tags(db_session, image_id, [cat.id, cat.id], is_admin_override=False)

        assert [f.tag_id for f in await get_final_tags(db_session, image_id)] == [cat.id]

    async def test_failed_write_keeps_previous_set(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        """An insert violating a foreign key rolls back the delete as well."""
        cat = group_tags[0]
        image_id, cat_id = image.id, cat.id
        await replace_final_tags(db_session, image_id, [cat_id], is_admin_override=True)

        with pytest.raises(FinalTagPersistenceError) as exc_info:
            await replace_final_tags(db_session, image_id, [cat_id, 99999], is_admin_override=False)

        assert isinstance(exc_info.value, PersistenceError)
        assert exc_info.value.image_id == image_id
        final_tags = await get_final_tags(db_session, image_id)
        assert [f.tag_id for f in final_tags] == [cat_id]
        assert final_tags[0].is_admin_override is True

    async def test_concurrent_replacements_do_not_mix(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        """Whichever write lands last, the stored set is one of the two batches."""
        cat, dog, outdoor = group_tags
        image_id = image.id

        await asyncio.gather(
            replace_final_tags(db_session, image_id, [cat.id, dog.id], is_admin_override=True),
            replace_final_tags(db_session, image_id, [outdoor.id], is_admin_override=False),
        )

        final_tags = await get_final_tags(db_session, image_id)
        stored = ({f.tag_id for f in final_tags}, {f.is_admin_override for f in final_tags})
        assert stored in [({cat.id, dog.id}, {True}), ({outdoor.id}, {False})]


@pytest.mark.unit
class TestTimestampColumns:
    """Rows inserted through the models store their default timestamps."""

    async def test_image_and_final_tag_rows_persist(
        self, db_session: AsyncSession, group: Groups, group_tags: list[Tags]
    ):
        img = Images(
            filename="fresh.png",
            filetype="png",
            base64_data=make_png_base64(),
            group_id=group.id,  # type: ignore[arg-type]
        )
        db_session.add(img)
        await db_session.commit()
        image_id = img.id
        assert img.uploaded_at.tzinfo is not None

        db_session.add(FinalTags(image_id=image_id, tag_id=group_tags[0].id))  # type: ignore[arg-type]
        await db_session.commit()

        uploaded_at = await db_session.scalar(select(Images.uploaded_at).where(Images.id == image_id))  # type: ignore[call-overload]
        final_count = await db_session.scalar(
            select(func.count()).select_from(FinalTags).where(FinalTags.image_id == image_id)  # type: ignore[arg-type]
        )
        assert uploaded_at is not None
        assert final_count == 1

    async def test_replace_on_fresh_image_succeeds(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        rows = await replace_final_tags(db_session, image.id, {group_tags[0].id}, is_admin_override=True)

        assert rows[0].created_at.tzinfo is not None
        final_tags = await get_final_tags(db_session, image.id)
        assert [f.tag_id for f in final_tags] == [group_tags[0].id]
        assert final_tags[0].model_dump(mode="json")["created_at"].endswith("Z")


@pytest.mark.unit
class TestHasAdminOverride:
    """Tests for has_admin_override."""

    async def test_no_final_tags(self, db_session: AsyncSession, image: Images):
        assert await has_admin_override(db_session, image.id) is False

    async def test_admin_set(self, db_session: AsyncSession, image: Images, group_tags: list[Tags]):
        await replace_final_tags(db_session, image.id, [group_tags[1].id], is_admin_override=True)

        assert await has_admin_override(db_session, image.id) is True

    async def test_auto_generated_overwrites_override(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        """Admin picks dog, then a consensus run stores cat and clears the override."""
        cat, dog, _ = group_tags
        image_id = image.id

        await replace_final_tags(db_session, image_id, {dog.id}, is_admin_override=True)
        assert await has_admin_override(db_session, image_id) is True

        await replace_final_tags(db_session, image_id, {cat.id}, is_admin_override=False)

        assert await has_admin_override(db_session, image_id) is False
        assert [f.tag_id for f in await get_final_tags(db_session, image_id)] == [cat.id]


@pytest.mark.unit
class TestAutoGenerateForImage:
    """Tests for auto_generate_for_image and get_tag_statistics."""

    async def test_scenario_four_labelers(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags], make_labeler
    ):
        cat, dog, outdoor = group_tags
        image_id, group_id = image.id, image.group_id
        labelers = [await make_labeler(f"labeler{i}", group_ids=[group_id]) for i in range(4)]
        for labeler in labelers[:3]:
            await _vote(db_session, image_id, labeler.id, cat.id)
        await _vote(db_session, image_id, labelers[3].id, dog.id)

        stats = await get_tag_statistics(db_session, await db_session.get(Images, image_id))
        assert [(s.tag_name, s.count, s.percentage) for s in stats] == [
            ("cat", 3, 75.0),
            ("dog", 1, 25.0),
            ("outdoor", 0, 0.0),
        ]
        assert all(s.total_labelers == 4 for s in stats)

        final_tags = await auto_generate_for_image(db_session, image_id)

        assert final_tags is not None
        assert [f.tag_id for f in final_tags] == [cat.id]
        assert final_tags[0].is_admin_override is False
        assert outdoor.id not in {f.tag_id for f in final_tags}

    async def test_no_assignments_leaves_final_tags_untouched(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags]
    ):
        dog = group_tags[1]
        image_id = image.id
        await replace_final_tags(db_session, image_id, [dog.id], is_admin_override=True)

        assert await auto_generate_for_image(db_session, image_id) is None

        final_tags = await get_final_tags(db_session, image_id)
        assert [f.tag_id for f in final_tags] == [dog.id]
        assert await has_admin_override(db_session, image_id) is True

    async def test_overwrites_admin_override(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags], make_labeler
    ):
        cat, dog, _ = group_tags
        image_id = image.id
        voter = await make_labeler("voter", group_ids=[image.group_id])
        await _vote(db_session, image_id, voter.id, cat.id)
        await replace_final_tags(db_session, image_id, [dog.id], is_admin_override=True)

        final_tags = await auto_generate_for_image(db_session, image_id)

        assert [f.tag_id for f in final_tags or []] == [cat.id]
        assert await has_admin_override(db_session, image_id) is False

    async def test_rows_removed_with_image_group(
        self, db_session: AsyncSession, image: Images, group_tags: list[Tags], group: Groups
    ):
        """Final tags cascade away when their group is deleted."""
        image_id = image.id
        await replace_final_tags(db_session, image_id, [group_tags[0].id], is_admin_override=False)

        await db_session.delete(group)
        await db_session.commit()

        count = await db_session.scalar(
            select(func.count()).select_from(FinalTags).where(FinalTags.image_id == image_id)  # type: ignore[arg-type]
        )
        assert count == 0
