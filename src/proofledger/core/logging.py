# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Logging setup for proofledger.

Two output shapes share one record layout:

- ``json``: one object per line, for log shippers and files
- ``text``: ``time level logger [cid] message``, coloured on a terminal

Handlers installed by ``configure_logging`` carry a CorrelationFilter that
stamps the active correlation id onto each record, so a relayed call can be
followed through the ledger, the directory and the asset. Ledger
rejections go through ``log_rejection`` and keep their error ``code`` and
details in the structured ``extra`` block.

Handlers added by the host application are left alone; only handlers this
module installed are replaced on reconfiguration.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from .exceptions import LedgerException

_correlation_id: ContextVar[str | None] = ContextVar("proofledger_correlation_id", default=None)

# Attribute set on handlers owned by configure_logging
_OWNED = "_proofledger_owned"


# =============================================================================
# CORRELATION IDS
# =============================================================================


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set (or with None, clear) the correlation id for the current context."""
    _correlation_id.set(correlation_id)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Generator[str, None, None]:
    """Scope a correlation id to a block, generating one if not given.

    Example:
        with correlation_context() as cid:
            ledger.submit_attestation(relayer, user, amount, nonce, signature)
    """
    cid = correlation_id or generate_correlation_id()
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)


class CorrelationFilter(logging.Filter):
    """Copy the context's correlation id onto ``record.correlation_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        return True


def _record_cid(record: logging.LogRecord) -> str | None:
    return getattr(record, "correlation_id", None) or get_correlation_id()


# =============================================================================
# REDACTION
# =============================================================================


def redact_signature(signature: bytes | str | None) -> str:
    """Shorten a signature for logging: first and last four bytes only."""
    if signature is None:
        return "<none>"
    hex_sig = signature.hex() if isinstance(signature, bytes | bytearray) else str(signature).removeprefix("0x")
    if len(hex_sig) <= 16:
        return "0x" + hex_sig
    return f"0x{hex_sig[:8]}...{hex_sig[-8:]}"


def _json_default(value: Any) -> str:
    if isinstance(value, bytes | bytearray):
        return "0x" + bytes(value).hex()
    return str(value)


# =============================================================================
# FORMATTERS
# =============================================================================


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: ``ts``, ``level``, ``logger``, ``message``, plus ``correlation_id``,
    ``extra`` (from ``extra={"extra_data": {...}}``) and ``exception`` when
    present. Bytes values are rendered as 0x-prefixed hex.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        cid = _record_cid(record)
        if cid:
            entry["correlation_id"] = cid
        extra = getattr(record, "extra_data", None)
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=_json_default)


class TextFormatter(logging.Formatter):
    """Human-readable single-line format for terminals."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool | None = None):
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s %(cid_prefix)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = sys.stderr.isatty() if use_colors is None else use_colors

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        cid = _record_cid(record)
        record.cid_prefix = f"[{cid[:8]}] " if cid else ""
        line = super().formatMessage(record)
        if self.use_colors:
            line = f"{self.LEVEL_COLORS.get(record.levelno, '')}{line}{self.RESET}"
        return line


# =============================================================================
# SETUP
# =============================================================================


def _use_json(log_format: str) -> bool:
    log_format = log_format.lower()
    if log_format in ("json", "text"):
        return log_format == "json"
    # Unset: JSON unless a human is watching
    return not sys.stderr.isatty()


def reset_logging() -> None:
    """Remove and close the handlers installed by configure_logging."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        if getattr(handler, _OWNED, False):
            root.removeHandler(handler)
            handler.close()


def _owned(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationFilter())
    setattr(handler, _OWNED, True)
    return handler


def configure_logging(
    level: str | int | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> logging.Logger:
    """Install proofledger's handlers on the root logger.

    Arguments left as None fall back to settings:

        PROOFLEDGER_LOG_LEVEL   level name (default INFO)
        PROOFLEDGER_LOG_FORMAT  "json", "text", or unset to auto-detect
        PROOFLEDGER_LOG_FILE    optional path; the file always gets JSON

    Returns:
        The root logger.
    """
    from .config import get_config

    settings = get_config()
    level = settings.log_level if level is None else level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if json_format is None:
        json_format = _use_json(settings.log_format)
    log_file = settings.log_file if log_file is None else log_file

    reset_logging()
    root = logging.getLogger()
    root.setLevel(level)

    console_formatter: logging.Formatter = JSONFormatter() if json_format else TextFormatter()
    root.addHandler(_owned(logging.StreamHandler(sys.stderr), console_formatter))
    if log_file:
        root.addHandler(_owned(logging.FileHandler(log_file), JSONFormatter()))
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_rejection(logger: logging.Logger, operation: str, exc: LedgerException) -> None:
    """Log a refused operation at WARNING with its error code and details."""
    logger.warning(
        "%s rejected: %s",
        operation,
        exc.code,
        extra={"extra_data": {"operation": operation, **exc.to_dict()}},
    )
