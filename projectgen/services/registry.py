from __future__ import annotations
import asyncio, logging, time
from dataclasses import dataclass, field
from typing import Dict, Any, Optional

log = logging.getLogger("projectgen.registry")

PROCESSING = "processing"
COMPLETED = "completed"
ERROR = "error"
TERMINAL = {COMPLETED, ERROR}

INITIAL_MESSAGE = "Инициализация проекта..."
MUTABLE_FIELDS = {"status", "progress", "message", "result", "error"}

@dataclass
class Job:
    id: str
    status: str = PROCESSING
    progress: int = 0
    message: str = INITIAL_MESSAGE
    result: Optional[bytes] = None
    error: Optional[str] = None
    last_updated: float = field(default_factory=time.time)

    def public(self) -> Dict[str, Any]:
        """Fields exposed to pollers; the artifact itself is never included."""
        return {"status": self.status, "progress": self.progress, "message": self.message, "error": self.error}

class JobRegistry:
    """In-memory job map owned by the running app.

    All methods are plain synchronous calls, so a merge is atomic with respect
    to the event loop and readers never see a half-applied update.
    """

    def __init__(self) -> None:
        self._jobs: Dict[str, Job] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def create(self, job_id: str) -> Job:
        existing = self._jobs.get(job_id)
        if existing is not None:
            return existing
        job = Job(id=job_id)
        self._jobs[job_id] = job
        return job

    def get(self, job_id: str) -> Optional[Job]:
        return self._jobs.get(job_id)

    def update(self, job_id: str, **fields: Any) -> Optional[Job]:
        job = self._jobs.get(job_id)
        if job is None:
            log.warning("[Job %s] update for unknown job ignored", job_id)
            return None
        if job.status in TERMINAL:
            log.warning("[Job %s] update after terminal status %s ignored", job_id, job.status)
            return job
        unknown = [key for key in fields if key not in MUTABLE_FIELDS]
        if unknown:
            raise AttributeError(f"Job has no mutable field(s) {unknown!r}")
        for key, value in fields.items():
            if key == "progress":
                value = max(job.progress, int(value))
            setattr(job, key, value)
        job.last_updated = time.time()
        log.info("[Job %s] Status: %s, Progress: %s%%", job_id, job.status, job.progress)
        return job

    def delete(self, job_id: str) -> None:
        self._jobs.pop(job_id, None)
        timer = self._timers.pop(job_id, None)
        if timer is not None:
            timer.cancel()

    def schedule_delete(self, job_id: str, delay: float) -> None:
        if job_id in self._timers:
            return
        loop = asyncio.get_running_loop()
        self._timers[job_id] = loop.call_later(max(0.0, delay), self._expire, job_id)

    def _expire(self, job_id: str) -> None:
        self._timers.pop(job_id, None)
        if self._jobs.pop(job_id, None) is not None:
            log.info("[Job %s] Removed", job_id)

    def purge(self, max_age: float) -> int:
        """Drop finished jobs untouched for ``max_age`` seconds; running jobs are never reclaimed."""
        cutoff = time.time() - max_age
        stale = [job_id for job_id, job in self._jobs.items()
                 if job.status in TERMINAL and job.last_updated < cutoff]
        for job_id in stale:
            self.delete(job_id)
        if stale:
            log.info("Retention sweep removed %d job(s)", len(stale))
        return len(stale)

    def start_sweeper(self, max_age: float, interval: Optional[float] = None) -> None:
        if max_age <= 0 or self._sweeper is not None:
            return
        every = interval if interval is not None else max(1.0, max_age / 4)

        async def sweep():
            while True:
                await asyncio.sleep(every)
                self.purge(max_age)

        self._sweeper = asyncio.get_running_loop().create_task(sweep())

    def close(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        if self._sweeper is not None:
            self._sweeper.cancel()
            self._sweeper = None

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)
