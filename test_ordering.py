import pytest
from sqlalchemy import select

from kanban_board.core.errors import NotFoundError
from kanban_board.models.project import Project
from kanban_board.schemas.ordering import ReorderItem
from kanban_board.services.ordering import (
    SORT_GAP,
    append_key,
    bulk_reorder,
    next_sort_key,
    resolve_keys
)
from kanban_board.services.project_service import ProjectService


class TestAppendKey:

    def test_empty_scope_starts_at_gap(self):
        assert append_key(None) == SORT_GAP == 1000

    def test_appends_one_gap_after_max(self):
        assert append_key(3000) == 4000

    def test_negative_keys_are_accepted(self):
        assert append_key(-1000) == 0


class TestResolveKeys:

    def test_explicit_keys_are_kept(self):
        items = [ReorderItem(id=5, sort_order=7), ReorderItem(id=6, sort_order=3)]
        assert resolve_keys(items) == [(5, 7), (6, 3)]

    def test_missing_keys_follow_payload_position(self):
        items = [ReorderItem(id=9), ReorderItem(id=4, sort_order=50), ReorderItem(id=2)]
        assert resolve_keys(items) == [(9, 1000), (4, 50), (2, 3000)]


class TestBulkReorder:

    @pytest.mark.asyncio
    async def test_next_sort_key_increases_by_gap(self, db):
        assert await next_sort_key(db, Project) == 1000

        first = await ProjectService.create(db=db, name="One")
        second = await ProjectService.create(db=db, name="Two")
        third = await ProjectService.create(db=db, name="Three")

        assert [first.sort_order, second.sort_order, third.sort_order] == [1000, 2000, 3000]
        assert await next_sort_key(db, Project) == 4000

    @pytest.mark.asyncio
    async def test_reorder_applies_keys(self, db):
        first = await ProjectService.create(db=db, name="One")
        second = await ProjectService.create(db=db, name="Two")

        updated = await bulk_reorder(db, Project, [
            ReorderItem(id=first.id, sort_order=2000),
            ReorderItem(id=second.id, sort_order=1000),
        ])

        assert updated == 2
        result = await db.execute(select(Project.name).order_by(Project.sort_order))
        assert result.scalars().all() == ["Two", "One"]

    @pytest.mark.asyncio
    async def test_unknown_id_fails_whole_batch(self, db):
        first = await ProjectService.create(db=db, name="One")
        second = await ProjectService.create(db=db, name="Two")
        first_id, second_id = first.id, second.id

        with pytest.raises(NotFoundError):
            await bulk_reorder(db, Project, [
                ReorderItem(id=first_id, sort_order=9000),
                ReorderItem(id=second_id, sort_order=8000),
                ReorderItem(id=999, sort_order=7000),
            ])

        result = await db.execute(select(Project.id, Project.sort_order).order_by(Project.id))
        assert result.all() == [(first_id, 1000), (second_id, 2000)]

    @pytest.mark.asyncio
    async def test_empty_batch_is_noop(self, db):
        assert await bulk_reorder(db, Project, []) == 0
