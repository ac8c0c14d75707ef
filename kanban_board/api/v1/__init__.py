from fastapi import APIRouter, Depends

from kanban_board.api.dependencies.auth import verify_api_key
from kanban_board.api.v1.projects import router as projects_router
from kanban_board.api.v1.columns import router as columns_router, project_columns_router
from kanban_board.api.v1.tasks import router as tasks_router, project_tasks_router
from kanban_board.api.v1.subtasks import router as subtasks_router, task_subtasks_router
from kanban_board.api.v1.tags import router as tags_router
from kanban_board.api.v1.linked_paths import router as linked_paths_router, project_linked_paths_router

# Every API route requires the shared secret
api_router = APIRouter(prefix="/api", dependencies=[Depends(verify_api_key)])

# Nested routers first: their /reorder paths must not be shadowed
api_router.include_router(project_columns_router)
api_router.include_router(project_tasks_router)
api_router.include_router(project_linked_paths_router)
api_router.include_router(task_subtasks_router)
api_router.include_router(projects_router)
api_router.include_router(columns_router)
api_router.include_router(tasks_router)
api_router.include_router(subtasks_router)
api_router.include_router(tags_router)
api_router.include_router(linked_paths_router)
