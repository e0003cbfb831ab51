"""Standalone worker: runs the reconciliation scheduler until SIGINT/SIGTERM."""

import asyncio
import logging
import signal

from leasing.core.database import create_engine, create_session_factory
from leasing.core.env_validation import validate_environment
from leasing.core.logging_config import configure_logging
from leasing.services.reconciliation import ReconciliationScheduler

logger = logging.getLogger(__name__)


async def serve() -> None:
    settings = validate_environment()
    configure_logging(settings.log_level)

    engine = create_engine(settings.database_url, echo=settings.database_echo)
    scheduler = ReconciliationScheduler.from_settings(settings, create_session_factory(engine))

    loop = asyncio.get_running_loop()
    stop_signal = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_signal.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C raises KeyboardInterrupt instead
            pass

    task = scheduler.start()
    waiter = asyncio.create_task(stop_signal.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        logger.info("[WORKER] Shutting down")
    finally:
        waiter.cancel()
        await scheduler.stop()
        await engine.dispose()


def main() -> None:
    asyncio.run(serve())


if __name__ == "__main__":
    main()
