"""
GrantLedger - Structured Logging Configuration

JSON log output for the ledger and the CLI. Every module logs through
``logging.getLogger(__name__)`` with an ``event`` key in ``extra``; this
module only decides where those records go and how they look.

Usage:
    from grantledger.core.logging_config import setup_logging

    logger = setup_logging(
        name="grantledger",
        log_file="/var/log/grantledger/ledger.json",
        level="INFO",
    )
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter that adds timestamp, network and service fields.
    """

    def __init__(
        self,
        fmt: str = "%(timestamp)s %(level)s %(name)s %(message)s",
        timestamp: bool = True,
        network: Optional[str] = None,
        service_name: str = "grantledger",
    ):
        super().__init__(fmt=fmt)
        self.timestamp = timestamp
        self.network = network or "testnet"
        self.service_name = service_name

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if self.timestamp and not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_record["network"] = self.network
        log_record["service"] = self.service_name

        if not log_record.get("level"):
            log_record["level"] = record.levelname.lower()

        log_record["source"] = {
            "function": record.funcName,
            "module": record.module,
            "line": record.lineno,
        }


def setup_logging(
    name: str = "grantledger",
    log_file: Optional[str] = None,
    level: str = "INFO",
    network: str = "testnet",
    json_format: bool = True,
    stream=None,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the ``name`` logger hierarchy.

    Args:
        name: Logger name; "grantledger" covers every module of the package
        log_file: Path to a rotating JSON log file (optional)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        network: Network label added to each JSON record
        json_format: Emit JSON; plain text otherwise
        stream: Console stream, stderr by default
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    numeric_level = getattr(logging, level.upper())
    logger.setLevel(numeric_level)

    # Reconfiguring replaces handlers
    logger.handlers = []

    if json_format:
        formatter: logging.Formatter = CustomJsonFormatter(
            timestamp=True,
            network=network,
            service_name=name.split(".")[0],
        )
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not create file handler for {log_file}: {e}")

    return logger


def get_logger(
    name: str,
    log_file: Optional[str] = None,
    level: str = "INFO",
) -> logging.Logger:
    """Get a logger, configuring it with the defaults if it has no handlers yet."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logging(name=name, log_file=log_file, level=level)
    return logger


def setup_from_config() -> logging.Logger:
    """Configure package logging from the GRANTLEDGER_LOG_* settings."""
    from . import config

    return setup_logging(
        name="grantledger",
        log_file=config.LOG_FILE or None,
        level=config.LOG_LEVEL,
        network=config.NETWORK.value,
        json_format=config.LOG_JSON,
    )
