"""infra.logging_cfg - process-wide logging for the chain API and the audit CLI.

Handlers live on the root logger only. Every module logs through
``logging.getLogger(__name__)``, so a single module can be turned up or down
without touching the rest:

    VERIFIER_LOG_LEVEL=WARNING
    VERIFIER_LOG_MODULES="verifier.inspector=DEBUG,infra.storage=INFO"
"""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Mapping, Optional

from verifier.errors import ConfigError

ENV_LOG_LEVEL = "VERIFIER_LOG_LEVEL"
ENV_LOG_MODULES = "VERIFIER_LOG_MODULES"
ENV_LOG_DIR = "VERIFIER_LOG_DIR"

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"


def parse_level(value: str | int) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"unknown log level: {value!r}")
    return level


def parse_module_levels(raw: Optional[str]) -> Dict[str, int]:
    """'a.b=DEBUG,c=WARNING' -> {'a.b': 10, 'c': 30}"""
    out: Dict[str, int] = {}
    for item in (raw or "").split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, level = item.partition("=")
        if not sep or not name.strip():
            raise ConfigError(f"bad module log level entry: {item!r} (expected name=LEVEL)")
        out[name.strip()] = parse_level(level)
    return out


def setup_logging(
    level: str | int | None = None,
    log_dir: str | None = None,
    module_levels: Optional[Mapping[str, str | int]] = None,
) -> Path | None:
    """Configure the root logger and per-module levels.

    Returns the log file path when a log directory is in effect, else None.
    """
    root_level = parse_level(level if level is not None else os.getenv(ENV_LOG_LEVEL, "INFO"))
    if module_levels is None:
        per_module = parse_module_levels(os.getenv(ENV_LOG_MODULES))
    else:
        per_module = {name: parse_level(lvl) for name, lvl in module_levels.items()}
    log_dir = log_dir or os.getenv(ENV_LOG_DIR) or None

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_path: Path | None = None
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        log_path = directory / f"verifier_{datetime.now(timezone.utc):%Y%m%dT%H%M%SZ}.log"
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=root_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=handlers,
        force=True,
    )
    for name, lvl in per_module.items():
        logging.getLogger(name).setLevel(lvl)
    return log_path
