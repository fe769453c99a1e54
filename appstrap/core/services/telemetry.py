"""
Telemetry — anonymous, fire-and-forget usage ping.

The ping runs on a daemon thread that is never joined and cannot be
cancelled. It has no ordering guarantee relative to the end of the run,
and its failure is unobservable: errors are logged at DEBUG and dropped.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import UTC, datetime

from appstrap.adapters.shell.command import QUICK_TIMEOUT, ProcessRunner
from appstrap.core.errors import ProcessError
from appstrap.core.models.config import Configuration

logger = logging.getLogger(__name__)


def build_payload(config: Configuration) -> dict:
    """Anonymous payload: which options were chosen, never their values."""
    flat = config.to_flat()
    return {
        "timestamp": datetime.now(UTC).isoformat(),
        "features": sorted(k for k, v in flat.items() if v is True),
        "db_driver": config.driver,
    }


def telemetry_command(url: str, payload: dict, timeout: int = QUICK_TIMEOUT) -> list[str]:
    return [
        "curl",
        "-X", "POST",
        url,
        "-H", "Content-Type: application/json",
        "-d", json.dumps(payload, sort_keys=True),
        "--silent",
        "--max-time", str(timeout),
    ]


def send_telemetry(
    config: Configuration,
    runner: ProcessRunner,
    url: str,
    timeout: int = QUICK_TIMEOUT,
) -> threading.Thread:
    """Start the ping in the background and return without waiting."""
    command = telemetry_command(url, build_payload(config), timeout)

    def _bg_send() -> None:
        try:
            runner.run(command, timeout=timeout + 1)
        except ProcessError as e:
            logger.debug("Telemetry not delivered: %s", e)

    thread = threading.Thread(target=_bg_send, name="appstrap-telemetry", daemon=True)
    thread.start()
    return thread
