#!/usr/bin/env python3
"""Run the background task worker.

Usage:
    python -m autolisting.scripts.run_worker
"""

import asyncio
import signal

from autolisting.config import settings
from autolisting.core.database import close_db
from autolisting.core.logging import get_logger, setup_logging
from autolisting.core.redis import close_redis, init_redis
from autolisting.core.tasks import TaskWorker
from autolisting.modules.urls.tasks import TASK_HANDLERS

logger = get_logger(__name__)


async def main() -> None:
    setup_logging()
    redis_client = await init_redis()
    worker = TaskWorker(redis_client, TASK_HANDLERS)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, worker.stop)

    logger.info("worker_booting", environment=settings.environment)
    try:
        await worker.run()
    finally:
        await close_redis()
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
