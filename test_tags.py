import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.api.v1.tags import create_tag, get_tags
from kanban_board.core.errors import ConflictError, NotFoundError, ValidationError
from kanban_board.models.tag import Tag
from kanban_board.schemas.tag import TagCreate
from kanban_board.services.tag_service import TagService


class TestTagService:

    @pytest.mark.asyncio
    async def test_create_and_list_by_name(self, db):
        await TagService.create(db=db, name="frontend", color="#ff0000")
        await TagService.create(db=db, name="backend", color="#00ff00")

        tags = await TagService.get_all(db=db)
        assert [t.name for t in tags] == ["backend", "frontend"]

    @pytest.mark.asyncio
    async def test_duplicate_name_is_conflict(self, db):
        original = await TagService.create(db=db, name="bug", color="#ff0000")
        original_id = original.id

        with pytest.raises(ConflictError):
            await TagService.create(db=db, name="bug", color="#0000ff")

        tags = await TagService.get_all(db=db)
        assert [(t.id, t.name, t.color) for t in tags] == [(original_id, "bug", "#ff0000")]

    @pytest.mark.asyncio
    async def test_rename_onto_existing_name(self, db):
        await TagService.create(db=db, name="bug", color="#ff0000")
        feature = await TagService.create(db=db, name="feature", color="#00ff00")
        feature_id = feature.id

        with pytest.raises(ConflictError):
            await TagService.update(db=db, tag_id=feature_id, name="bug")

        tag = await TagService.get_by_id(db=db, tag_id=feature_id)
        assert tag.name == "feature"

    @pytest.mark.asyncio
    async def test_concurrent_insert_of_same_name_is_conflict(self, db):
        await TagService.create(db=db, name="bug", color="#ff0000")

        with patch.object(TagService, "_name_taken", AsyncMock(return_value=False)):
            with pytest.raises(ConflictError):
                await TagService.create(db=db, name="bug", color="#0000ff")

        tags = await TagService.get_all(db=db)
        assert [(t.name, t.color) for t in tags] == [("bug", "#ff0000")]

    @pytest.mark.asyncio
    async def test_concurrent_rename_onto_same_name_is_conflict(self, db):
        await TagService.create(db=db, name="bug", color="#ff0000")
        feature = await TagService.create(db=db, name="feature", color="#00ff00")
        feature_id = feature.id

        with patch.object(TagService, "_name_taken", AsyncMock(return_value=False)):
            with pytest.raises(ConflictError):
                await TagService.update(db=db, tag_id=feature_id, name="bug")

        tags = await TagService.get_all(db=db)
        assert [t.name for t in tags] == ["bug", "feature"]

    @pytest.mark.asyncio
    async def test_recolour_keeps_name(self, db):
        tag = await TagService.create(db=db, name="bug", color="#ff0000")

        updated = await TagService.update(db=db, tag_id=tag.id, color="#123456")

        assert (updated.name, updated.color) == ("bug", "#123456")

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, db):
        with pytest.raises(ValidationError):
            await TagService.create(db=db, name=" ", color="#ff0000")

    @pytest.mark.asyncio
    async def test_delete_absent_tag_is_not_found(self, db):
        with pytest.raises(NotFoundError):
            await TagService.delete(db=db, tag_id=12345)

    @pytest.mark.asyncio
    async def test_delete_then_missing(self, db):
        tag = await TagService.create(db=db, name="tmp", color="#000000")
        tag_id = tag.id

        await TagService.delete(db=db, tag_id=tag_id)

        assert await TagService.get_by_id(db=db, tag_id=tag_id) is None
        with pytest.raises(NotFoundError):
            await TagService.delete(db=db, tag_id=tag_id)


class TestTagRoutes:

    @pytest.fixture
    def mock_db(self):
        return AsyncMock(spec=AsyncSession)

    @pytest.mark.asyncio
    async def test_create_tag_uses_default_colour(self, mock_db):
        created = MagicMock(spec=Tag)
        with patch('kanban_board.api.v1.tags.TagService.create', return_value=created) as mock_create:
            result = await create_tag(tag_create=TagCreate(name="docs"), db=mock_db)

            assert result == created
            mock_create.assert_called_once_with(db=mock_db, name="docs", color="#6b7280")

    @pytest.mark.asyncio
    async def test_get_tags(self, mock_db):
        with patch('kanban_board.api.v1.tags.TagService.get_all', return_value=[]) as mock_get_all:
            assert await get_tags(db=mock_db) == []
            mock_get_all.assert_called_once_with(db=mock_db)
