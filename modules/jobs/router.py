from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from .schemas import ProviderStatus, SearchRequest, SearchStarted, SearchTask
from .orchestrator import JobSearchOrchestrator
from .providers.jsearch import JSearchProvider


router = APIRouter()

_ORCHESTRATOR: Optional[JobSearchOrchestrator] = None


def get_orchestrator() -> JobSearchOrchestrator:
    global _ORCHESTRATOR
    if _ORCHESTRATOR is None:
        _ORCHESTRATOR = JobSearchOrchestrator(JSearchProvider())
    return _ORCHESTRATOR


async def drain() -> None:
    """Wait for running searches; a no-op when no search was ever started."""
    if _ORCHESTRATOR is not None:
        await _ORCHESTRATOR.wait()


@router.post("/search", response_model=SearchStarted, status_code=202)
async def search(input: SearchRequest, orchestrator: JobSearchOrchestrator = Depends(get_orchestrator)):
    if not input.keyword:
        raise HTTPException(status_code=400, detail="Either role or designation is required")
    task_id = await orchestrator.start_search(input)
    return SearchStarted(task_id=task_id, poll_url=f"/jobs/search/poll/{task_id}")


@router.get("/search/poll/{task_id}", response_model=SearchTask)
def poll(task_id: str, orchestrator: JobSearchOrchestrator = Depends(get_orchestrator)):
    task = orchestrator.poll(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found or expired")
    return task


@router.get("/health", response_model=ProviderStatus)
def health(orchestrator: JobSearchOrchestrator = Depends(get_orchestrator)):
    return orchestrator.provider.status()
