"""Background search-and-score runs, observed by polling.

``start_search`` records a task and hands the work to the event loop, returning
the task id at once. The background run fetches one page from the job
provider, then scores postings in sequential batches; the postings inside a
batch are scored concurrently. A posting that fails to score keeps a null
score and the run continues. Terminal tasks are kept for a retention window so
pollers can read the outcome, then dropped from the store.
"""
import asyncio
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set

from modules.ats.schemas import AnalysisResult, JobPosting, ResumeProfile, ScoringWeights
from modules.ats.scorer import analyze
from modules.shared.config import ATS_BATCH_SIZE, ATS_MAX_JOBS, DEFAULT_SEARCH_LOCATION, TASK_RETENTION_SEC
from modules.shared.logging import get_logger
from .convert import listing_to_posting, resume_to_profile, summarize
from .providers.base import JobProvider, ProviderAuthError, ProviderError, ProviderRequestError, RateLimitError
from .schemas import JobListing, NoJobsGuidance, ScoredJob, SearchRequest, SearchTask
from .store import InMemoryTaskStore, TaskStore

logger = get_logger("jobs.orchestrator")

Scorer = Callable[[ResumeProfile, JobPosting, Optional[ScoringWeights]], AnalysisResult]


def no_jobs_guidance(keyword: str, location: str, company: Optional[str] = None) -> NoJobsGuidance:
    if company:
        message = f'Unfortunately, there are no current openings for "{keyword}" at {company} in {location}.'
    else:
        message = f'Unfortunately, there are no current openings for "{keyword}" in {location}.'
    suggestions = [
        "Consider expanding your location or trying the \"remote\" option",
        "Use different keywords or job titles",
    ]
    if company:
        suggestions.insert(0, "Try a general search instead of a company-specific search for better results")
    return NoJobsGuidance(message=message, suggestions=suggestions)


def error_kind(exc: Exception) -> str:
    if isinstance(exc, RateLimitError):
        return "rate_limited"
    if isinstance(exc, ProviderAuthError):
        return "auth"
    if isinstance(exc, ProviderRequestError):
        return "bad_request"
    if isinstance(exc, ProviderError):
        return "provider"
    return "internal"


class JobSearchOrchestrator:
    def __init__(
        self,
        provider: JobProvider,
        store: Optional[TaskStore] = None,
        scorer: Scorer = analyze,
        batch_size: int = ATS_BATCH_SIZE,
        max_jobs: int = ATS_MAX_JOBS,
        retention_sec: float = TASK_RETENTION_SEC,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.provider = provider
        self.store = store if store is not None else InMemoryTaskStore()
        self.scorer = scorer
        self.batch_size = batch_size
        self.max_jobs = max_jobs
        self.retention_sec = retention_sec
        # strong refs so fire-and-forget runs are not garbage collected mid-flight
        self._running: Set[asyncio.Task] = set()

    async def start_search(self, request: SearchRequest) -> str:
        if not request.keyword:
            raise ValueError("Either role or designation is required")
        purged = self.store.sweep()
        if purged:
            logger.debug(f"purged {purged} expired tasks")

        task_id = str(uuid.uuid4())
        self.store.put(SearchTask(task_id=task_id, status_message="Searching jobs..."))
        handle = asyncio.get_running_loop().create_task(self.run(task_id, request))
        self._running.add(handle)
        handle.add_done_callback(self._running.discard)
        logger.info(f"task {task_id} started: {request.keyword!r} in {request.location or DEFAULT_SEARCH_LOCATION}")
        return task_id

    def poll(self, task_id: str) -> Optional[SearchTask]:
        """Snapshot of the task, or None once it is unknown or expired."""
        task = self.store.get(task_id)
        return task.model_copy(deep=True) if task is not None else None

    async def wait(self) -> None:
        """Block until every background run started so far has finished.

        Called on application shutdown so in-flight searches are not cut off.
        """
        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)

    async def run(self, task_id: str, request: SearchRequest) -> None:
        task = self.store.get(task_id)
        if task is None:
            return
        location = request.location or DEFAULT_SEARCH_LOCATION
        try:
            listings = await asyncio.to_thread(
                self.provider.search,
                request.keyword,
                location,
                request.experience_level,
                1,
                1,
                request.company,
                request.platform,
            )
            task.found_jobs = len(listings)
            logger.info(f"task {task_id}: provider returned {len(listings)} jobs")

            if not listings:
                task.no_jobs_message = no_jobs_guidance(request.keyword, location, request.company)
                self._finish(task, "No jobs found")
                return

            if request.resume is None:
                task.status = "analyzing"
                task.jobs = [ScoredJob(job=j) for j in listings]
                task.total_jobs = task.processed_jobs = len(listings)
                self._finish(task, f"Found {len(listings)} jobs")
                return

            task.status = "analyzing"
            self._save(task, f"Found {len(listings)} jobs")
            profile = resume_to_profile(request.resume)
            await self._score_all(task, listings, profile, request.custom_weights)
            task.ats_analyzed = True
            self._finish(task, f"Analyzed {task.processed_jobs} jobs")
        except Exception as e:
            logger.exception(f"task {task_id} failed")
            task.status = "failed"
            task.error = str(e) or type(e).__name__
            task.error_kind = error_kind(e)
            if isinstance(e, RateLimitError):
                task.retry_after = e.retry_after
            task.completed = True
            self._save(task, "Job search failed")
        finally:
            self.store.expire(task_id, self.retention_sec)

    async def _score_all(
        self,
        task: SearchTask,
        listings: List[JobListing],
        profile: ResumeProfile,
        weights: Optional[ScoringWeights],
    ) -> None:
        to_score = listings[: self.max_jobs]
        task.total_jobs = len(to_score)
        for start in range(0, len(to_score), self.batch_size):
            batch = to_score[start:start + self.batch_size]
            scored = await asyncio.gather(*(self._score_one(profile, job, weights) for job in batch))
            task.jobs.extend(scored)
            task.processed_jobs = len(task.jobs)
            task.progress = round(task.processed_jobs / task.total_jobs * 100)
            self._save(task, f"Analyzed {task.processed_jobs}/{task.total_jobs} jobs")
            logger.info(f"task {task.task_id}: {task.processed_jobs}/{task.total_jobs} jobs analyzed")

        task.jobs.sort(key=lambda j: j.ats_score or 0, reverse=True)

    async def _score_one(
        self,
        profile: ResumeProfile,
        listing: JobListing,
        weights: Optional[ScoringWeights],
    ) -> ScoredJob:
        try:
            posting = listing_to_posting(listing)
            result = await asyncio.to_thread(self.scorer, profile, posting, weights)
        except Exception as e:
            logger.warning(f"scoring failed for job {listing.id} ({listing.title}): {e}")
            return ScoredJob(job=listing)
        return ScoredJob(job=listing, ats_score=result.overall_match_percentage, ats_analysis=summarize(result))

    def _finish(self, task: SearchTask, message: str) -> None:
        task.status = "completed"
        task.completed = True
        task.progress = 100
        self._save(task, message)

    def _save(self, task: SearchTask, message: str) -> None:
        task.status_message = message
        task.last_update = datetime.now(timezone.utc)
        self.store.put(task)
