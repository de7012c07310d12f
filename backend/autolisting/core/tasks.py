"""Fire-and-forget background tasks on a Redis list.

Producers call ``TaskQueue.enqueue`` and return immediately; nothing is
reported back to them. ``TaskWorker`` pops envelopes and runs the
registered handler. Delivery is at-least-once: a failed handler is
re-enqueued until ``task_max_attempts`` is reached, so handlers must be
idempotent.
"""

from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError
from redis.asyncio import Redis

from autolisting.config import settings
from autolisting.core.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)

TaskHandler = Callable[[dict[str, Any]], Awaitable[None]]


class TaskEnvelope(BaseModel):
    """Serialized task as stored in the queue."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    payload: dict[str, Any] = Field(default_factory=dict)
    attempt: int = 1
    enqueued_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class TaskQueue:
    """Producer side of the task queue."""

    def __init__(self, redis_client: Redis | None, queue_name: str | None = None) -> None:
        self.redis = redis_client
        self.queue_name = queue_name or settings.task_queue_name

    async def enqueue(self, task_name: str, payload: dict[str, Any]) -> None:
        """Submit a task. Raises if the queue backend is unreachable."""
        if self.redis is None:
            raise RuntimeError("Redis is not initialized; cannot enqueue tasks")

        envelope = TaskEnvelope(name=task_name, payload=payload)
        await self.redis.lpush(self.queue_name, envelope.model_dump_json())

        logger.info("task_enqueued", task_id=envelope.id, task_name=task_name)


class TaskWorker:
    """Consumer loop dispatching queued tasks to async handlers."""

    def __init__(
        self,
        redis_client: Redis,
        handlers: Mapping[str, TaskHandler],
        *,
        queue_name: str | None = None,
        max_attempts: int | None = None,
        poll_timeout: int | None = None,
    ) -> None:
        self.redis = redis_client
        self.handlers = dict(handlers)
        self.queue_name = queue_name or settings.task_queue_name
        self.max_attempts = (
            max_attempts if max_attempts is not None else settings.task_max_attempts
        )
        # 0 makes BRPOP block until a task arrives.
        self.poll_timeout = (
            poll_timeout if poll_timeout is not None else settings.worker_poll_timeout_seconds
        )
        self._running = False

    async def run(self) -> None:
        """Process tasks until ``stop`` is called."""
        self._running = True
        logger.info("worker_started", queue=self.queue_name, tasks=sorted(self.handlers))

        while self._running:
            await self.run_once()

        logger.info("worker_stopped", queue=self.queue_name)

    def stop(self) -> None:
        """Stop after the task currently being processed."""
        self._running = False

    async def run_once(self) -> bool:
        """Wait for one task and process it. Returns False on poll timeout."""
        item = await self.redis.brpop([self.queue_name], timeout=self.poll_timeout)
        if item is None:
            return False

        _, raw = item
        await self.process(raw)
        return True

    async def process(self, raw: str | bytes) -> None:
        """Run the handler for one serialized envelope."""
        try:
            envelope = TaskEnvelope.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error("task_malformed", error=str(e))
            return

        handler = self.handlers.get(envelope.name)
        if handler is None:
            logger.warning("task_unknown", task_id=envelope.id, task_name=envelope.name)
            return

        bind_context(task_id=envelope.id, task_name=envelope.name, attempt=envelope.attempt)
        try:
            await handler(envelope.payload)
        except Exception as e:
            logger.exception("task_failed", error=str(e))
            await self._retry(envelope)
        else:
            logger.info("task_completed")
        finally:
            clear_context()

    async def _retry(self, envelope: TaskEnvelope) -> None:
        if envelope.attempt >= self.max_attempts:
            logger.error("task_dropped", max_attempts=self.max_attempts)
            return

        retry = envelope.model_copy(update={"attempt": envelope.attempt + 1})
        await self.redis.lpush(self.queue_name, retry.model_dump_json())
        logger.info("task_requeued", next_attempt=retry.attempt)
