# storefront/api/routers/tasks.py
from fastapi import APIRouter, Depends

from storefront.api.deps import get_task_service, require_admin
from storefront.domain.schemas import Identity, ManualSyncOut, TaskStatusOut
from storefront.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("/sync-products", response_model=ManualSyncOut)
def run_manual_sync(
    _: Identity = Depends(require_admin),
    tasks: TaskService = Depends(get_task_service),
):
    """
    Reczna synchronizacja. Gdy bieg juz trwa -> tylko komunikat, bez drugiego biegu.
    """
    return tasks.run_manual_sync()


@router.get("/status", response_model=TaskStatusOut)
def get_status(
    _: Identity = Depends(require_admin),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.get_status()
