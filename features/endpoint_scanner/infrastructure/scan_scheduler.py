from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from features.endpoint_scanner.application.scan_scheduler import ScanScheduler
from features.endpoint_scanner.application.selector import EndpointSelector
from features.endpoint_scanner.domain.errors import ConfigError
from features.endpoint_scanner.domain.models import ScannerConfig
from features.endpoint_scanner.infrastructure.config_loader import YamlConfigSource
from features.endpoint_scanner.infrastructure.console_reporter import ConsoleReporter
from features.endpoint_scanner.infrastructure.nmap_probe import NmapProbe
from features.endpoint_scanner.infrastructure.settings import (
    endpoints_config_path,
    log_level,
    nmap_binary,
    probe_timeout_seconds,
)


logger = logging.getLogger(__name__)


def build_scheduler(config_path: Optional[Path] = None) -> tuple[ScanScheduler, ScannerConfig]:
    """Load config and wire the scan pipeline. Raises ConfigError before anything runs."""
    source = YamlConfigSource(config_path or endpoints_config_path())
    config = source.load()

    reporter = ConsoleReporter()
    probe = NmapProbe(
        nmap_path=nmap_binary(),
        timeout=probe_timeout_seconds(),
        reporter=reporter,
    )
    selector = EndpointSelector(probe=probe)
    scheduler = ScanScheduler(selector=selector, reporter=reporter)
    return scheduler, config


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, log_level(), logging.INFO),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    configure_logging()
    try:
        scheduler, config = build_scheduler()
    except ConfigError as exc:
        logger.error("%s", exc)
        return 1

    def _stop(signum, frame):  # noqa: ARG001
        scheduler.stop()

    signal.signal(signal.SIGTERM, _stop)
    signal.signal(signal.SIGINT, _stop)

    scheduler.run(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
