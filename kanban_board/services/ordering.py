"""Gap-key ordering for every manually orderable entity.

Siblings (projects, columns of a project, tasks of a project, subtasks of a
task) are ordered by a sparse integer ``sort_order``. New items are appended
``SORT_GAP`` after the current maximum, which leaves room for manual
insertions between neighbours without renumbering the whole scope.
"""
from typing import List, Sequence, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kanban_board.core.errors import NotFoundError
from kanban_board.db.database import atomic
from kanban_board.logs import debug_logger
from kanban_board.schemas.ordering import ReorderItem

SORT_GAP = 1000


def append_key(max_key) -> int:
    """Key placing a new item after the sibling holding max_key (None for an empty scope)"""
    if max_key is None:
        return SORT_GAP
    return max_key + SORT_GAP


def resolve_keys(items: Sequence[ReorderItem]) -> List[Tuple[int, int]]:
    """(id, key) pairs; items without an explicit key are keyed by their position"""
    return [
        (item.id, item.sort_order if item.sort_order is not None else (position + 1) * SORT_GAP)
        for position, item in enumerate(items)
    ]


async def next_sort_key(db: AsyncSession, model, *scope) -> int:
    """Append key for a new row of ``model`` among the rows matching ``scope``"""
    query = select(func.max(model.sort_order))
    if scope:
        query = query.where(*scope)
    result = await db.execute(query)
    return append_key(result.scalar())


async def bulk_reorder(db: AsyncSession, model, items: Sequence[ReorderItem], *scope) -> int:
    """Apply caller-supplied keys to many siblings in one transaction.

    Every update is filtered by ``scope`` as well as by id, so an id from a
    different parent never moves. An id that matches no row inside the scope
    fails the whole batch; nothing is applied in that case. Keys are applied
    as given: distinctness and monotonicity are the caller's concern.

    Returns the number of rows updated.
    """
    pairs = resolve_keys(items)
    if not pairs:
        return 0

    missing = []
    async with atomic(db):
        for item_id, sort_order in pairs:
            stmt = update(model).where(model.id == item_id, *scope).values(sort_order=sort_order)
            result = await db.execute(stmt)
            if result.rowcount == 0:
                missing.append(item_id)

        if missing:
            debug_logger.warning(
                f"Reorder of {model.__tablename__} rejected, ids outside scope: {missing}"
            )
            raise NotFoundError(
                f"{model.__tablename__} not found in scope: {', '.join(str(i) for i in missing)}"
            )

    debug_logger.info(f"Reordered {len(pairs)} {model.__tablename__}")
    return len(pairs)
