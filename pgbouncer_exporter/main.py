"""Runner for the pgbouncer exporter."""

import argparse
import asyncio
import signal
import sys
from typing import Any, Optional, Sequence

from prometheus_client import CollectorRegistry
from pydantic import ValidationError

from pgbouncer_exporter import __version__
from pgbouncer_exporter.adapters.admin_executor import PsycopgAdminExecutor
from pgbouncer_exporter.adapters.collector import PrometheusScrapeCollector
from pgbouncer_exporter.adapters.metrics_renderer import PrometheusMetricsRenderer
from pgbouncer_exporter.api.metrics import MetricsServer
from pgbouncer_exporter.core.config import Settings
from pgbouncer_exporter.core.exceptions import AdminConnectionError
from pgbouncer_exporter.core.logging import configure_logging
from pgbouncer_exporter.core.logging import logger as global_logger
from pgbouncer_exporter.core.scraper import ScrapeOrchestrator
from pgbouncer_exporter.domains.metrics import build_registry


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgbouncer-exporter",
        description="Expose PgBouncer admin console statistics as Prometheus metrics.",
    )
    parser.add_argument(
        "-l",
        dest="listen_address",
        help="Address to listen on for web interface and telemetry (default :9186)",
    )
    parser.add_argument(
        "-p",
        dest="telemetry_path",
        help="URL path under which to expose metrics (default /debug/metrics)",
    )
    parser.add_argument(
        "-d",
        dest="data_source_name",
        help="pgbouncer dsn/url in postgres format",
    )
    parser.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--log-format", dest="log_format", choices=("text", "json"))
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    """Parse flags and merge them with the environment.

    Exits with status 2 on invalid configuration, as argparse does.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    flags: dict[str, Any] = {k: v for k, v in vars(args).items() if v is not None}
    try:
        return Settings(**flags)
    except ValidationError as e:
        parser.error(str(e))


async def serve(settings: Settings) -> None:
    """Wire the exporter together and serve until SIGINT/SIGTERM."""
    logger = global_logger.with_context(context_base="main", operation="runner")

    registry = build_registry()
    executor = PsycopgAdminExecutor(settings.data_source_name)
    try:
        executor.connect()
    except AdminConnectionError as e:
        logger.warning(f"Fail to connect to pgbouncer, waiting... : {e}")

    orchestrator = ScrapeOrchestrator(registry, executor)
    collector_registry = CollectorRegistry()
    collector_registry.register(PrometheusScrapeCollector(orchestrator, registry))
    server = MetricsServer(PrometheusMetricsRenderer(collector_registry), settings.telemetry_path)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop.set)

    await server.start(host=settings.host, port=settings.port)
    try:
        await stop.wait()
    finally:
        logger.info("Shutdown requested... exiting.")
        await server.stop()
        orchestrator.close()


def run(argv: Optional[Sequence[str]] = None) -> None:
    settings = load_settings(argv)
    configure_logging(settings.log_level, settings.log_format)
    global_logger.info(
        f"pgbouncer-exporter {__version__} using {settings.masked_data_source_name}"
    )
    asyncio.run(serve(settings))


if __name__ == "__main__":
    run(sys.argv[1:])
