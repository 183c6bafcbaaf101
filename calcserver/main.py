"""Entry point for a calculator server.
Builds the process's vector clock and event log, starts the gRPC server.
"""

import asyncio
import signal
import sys

from common.constants import SERVER_SHUTDOWN_GRACE_SECONDS
from common.event_log import EventLog
from common.exceptions import ConfigurationError
from common.logging_config import setup_logging
from common.vector_clock import VectorClock
from calcserver.config import ServerSettings, load_server_settings
from calcserver.grpc_server import CalculatorServicer, create_server


async def serve(settings: ServerSettings, clock: VectorClock, logger) -> None:
    """
    Start and run gRPC server.

    Args:
        settings: Validated server settings
        clock: The server process's vector clock
        logger: Component logger
    """
    servicer = CalculatorServicer(
        server_name=settings.server_name,
        clock=clock,
        event_log=EventLog(settings.process_id),
        max_processing_delay_ms=settings.max_processing_delay_ms
    )
    server = create_server(servicer)
    server.add_insecure_port(settings.listen_address)

    logger.info(f"Starting {settings.server_name} on {settings.listen_address}")
    await server.start()

    async def shutdown(sig=None):
        if sig:
            logger.info(f"Received signal {sig}, shutting down...")
        else:
            logger.info("Shutting down...")

        await server.stop(SERVER_SHUTDOWN_GRACE_SECONDS)
        logger.info(
            f"{settings.server_name} stopped after {servicer.request_count} requests, "
            f"{len(servicer.event_log)} events logged"
        )

    if sys.platform != 'win32':
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, lambda s=sig: asyncio.create_task(shutdown(s)))

    try:
        await server.wait_for_termination()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
        await shutdown()


def main() -> None:
    """Bootstrap calculator server."""
    log_level = 'DEBUG' if '--debug' in sys.argv else None

    try:
        settings = load_server_settings()
        clock = VectorClock(settings.process_id, settings.roster)
    except ConfigurationError as e:
        setup_logging('calcserver', log_level=log_level).error(f"Invalid configuration: {e}")
        sys.exit(2)

    logger = setup_logging('calcserver', log_level=log_level, clock=clock)
    logger.info(f"Initializing {settings.server_name} (process id {settings.process_id})")

    try:
        asyncio.run(serve(settings, clock, logger))
    except KeyboardInterrupt:
        logger.info("Calculator server shutdown complete")
    except Exception as e:
        logger.error(f"Server error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
