"""Single background worker that drains pending jobs through the provider.

Every provider call is spaced at least ``min_interval`` seconds after the
previous one, measured start-to-start. The clock is marked before the call is
issued so a slow provider cannot shorten that spacing.
"""
import asyncio
import logging
import time
from typing import Optional

from . import config, metrics
from .models import Job, JobStatus
from .providers import TextProvider, get_provider
from .rate_limit import InMemoryRateLimitClock, get_rate_limit_clock
from .store import JobStore

logger = logging.getLogger(__name__)


def describe_failure(exc: BaseException) -> str:
    detail = str(exc).strip() or type(exc).__name__
    return f"Error: {detail}"


class Dispatcher:
    def __init__(
        self,
        store: JobStore,
        provider: TextProvider,
        clock=None,
        min_interval: float = config.MIN_CALL_INTERVAL_SECONDS,
        idle_interval: float = config.IDLE_INTERVAL_SECONDS,
    ):
        self.store = store
        self.provider = provider
        self.clock = clock if clock is not None else InMemoryRateLimitClock()
        self.min_interval = min_interval
        self.idle_interval = idle_interval
        self.running = False
        self._stopping = asyncio.Event()

    async def step(self) -> float:
        """Run one iteration and return how long to sleep before the next one."""
        last = await self.clock.last_call_at()
        if last is not None:
            elapsed = self.clock.now() - last
            if elapsed < self.min_interval:
                return self.min_interval - elapsed

        job = self.store.next_pending()
        metrics.jobs_pending.set(self.store.counts()[JobStatus.pending])
        if job is None:
            return self.idle_interval

        await self.handle_job(job)
        return self.idle_interval

    async def handle_job(self, job: Job) -> None:
        self.store.set_status(job.id, JobStatus.processing)
        start = time.perf_counter()
        try:
            # Once PROCESSING, every failure below must end the job as FAILED
            await self.clock.mark(self.clock.now())
            logger.info("dispatching job %s (prompt_len=%d)", job.id, len(job.prompt))
            text = await self.provider.generate(job.prompt)
            if not isinstance(text, str):
                raise TypeError(f"provider returned {type(text).__name__}, expected str")
        except asyncio.CancelledError:
            self.store.set_status(job.id, JobStatus.failed, "Error: dispatcher stopped before the provider call finished")
            metrics.jobs_failed_total.inc()
            raise
        except Exception as e:
            logger.warning("job %s failed: %s", job.id, e)
            self.store.set_status(job.id, JobStatus.failed, describe_failure(e))
            metrics.jobs_failed_total.inc()
            return
        finally:
            metrics.provider_call_latency_seconds.observe(time.perf_counter() - start)

        self.store.set_status(job.id, JobStatus.complete, text)
        metrics.jobs_completed_total.inc()
        logger.info("job %s complete (result_len=%d)", job.id, len(text))

    async def run(self) -> None:
        self.running = True
        metrics.dispatcher_running.set(1)
        logger.info("dispatcher: started (min_interval=%.1fs idle_interval=%.1fs)",
                    self.min_interval, self.idle_interval)
        try:
            while not self._stopping.is_set():
                try:
                    delay = await self.step()
                except Exception:
                    logger.exception("dispatcher: iteration failed")
                    delay = self.idle_interval
                await self._sleep(delay)
        finally:
            self.running = False
            self._stopping.clear()
            metrics.dispatcher_running.set(0)
            logger.info("dispatcher: stopped")

    def stop(self) -> None:
        """Make run() return after the current iteration. The dispatcher can be run again later."""
        self._stopping.set()

    async def _sleep(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=max(seconds, 0.0))
        except asyncio.TimeoutError:
            pass


def build_dispatcher(store: JobStore, provider: Optional[TextProvider] = None, clock=None) -> Dispatcher:
    return Dispatcher(
        store,
        provider if provider is not None else get_provider(),
        clock if clock is not None else get_rate_limit_clock(),
    )
