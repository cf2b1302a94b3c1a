"""
Logging setup with contextvars-based metadata injection.

Every log line carries a short run tag (r=) and the current detection request
id (q=). Console-only logging or console + rotating file logs.
"""

import contextvars
import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

cv_run_tag = contextvars.ContextVar("run_tag", default="-")
cv_request_id = contextvars.ContextVar("request_id", default="-")

# Trace metadata only (not printed on every line)
cv_provider = contextvars.ContextVar("provider", default="-")
cv_model = contextvars.ContextVar("model", default="-")
cv_run_id_full = contextvars.ContextVar("run_id_full", default="-")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] r=%(run)s q=%(request)s | %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s | r=%(run)s q=%(request)s | %(message)s"

# Third-party logger -> minimum level
THIRD_PARTY_LEVELS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "urllib3": logging.WARNING,
    "openai": logging.WARNING,
    "anthropic": logging.WARNING,
    "opik": logging.INFO,
}


def make_run_tag(run_id_full: str, length: int = 8) -> str:
    """Short BLAKE2s tag of the full run id."""
    h = hashlib.blake2s(run_id_full.encode("utf-8"), digest_size=8).hexdigest()
    return h[:length]


class ContextInjectFilter(logging.Filter):
    """Copy run tag and request id onto each record as ``run`` and ``request``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run = cv_run_tag.get() or "-"
        record.request = cv_request_id.get() or "-"
        return True


def set_log_context(
    *,
    run_id_full: str | None = None,
    request_id: str | None = None,
    provider: str | None = None,
    model: str | None = None,
) -> None:
    """Update logging context. Unset arguments leave the current value alone."""
    if run_id_full is not None:
        cv_run_id_full.set(str(run_id_full))
        cv_run_tag.set(make_run_tag(str(run_id_full)))
    if request_id is not None:
        cv_request_id.set(str(request_id))
    if provider is not None:
        cv_provider.set(str(provider))
    if model is not None:
        cv_model.set(str(model))


def get_log_context() -> dict[str, str]:
    """
    Current context as a dict.

    Passed as ``extra_trace_meta`` to classifier calls so Opik spans and log
    lines can be correlated.
    """
    return {
        "run_tag": str(cv_run_tag.get() or "-"),
        "run_id_full": str(cv_run_id_full.get() or "-"),
        "request_id": str(cv_request_id.get() or "-"),
        "provider": str(cv_provider.get() or "-"),
        "model": str(cv_model.get() or "-"),
    }


@contextmanager
def request_context(request_id: str) -> Iterator[str]:
    """Tag log lines with ``request_id`` for the duration of the block, then restore the previous id."""
    token = cv_request_id.set(str(request_id))
    try:
        yield request_id
    finally:
        cv_request_id.reset(token)


def configure_logging(
    *,
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10_000_000,  # 10MB
    backup_count: int = 5,
) -> None:
    """
    Configure root logging. Safe to call more than once (existing handlers are replaced).

    Args:
        log_file: Optional path to a rotating log file
        console_level: Minimum level for console output (default: INFO)
        file_level: Minimum level for file output (default: DEBUG)
        max_bytes: Max log file size before rotation
        backup_count: Number of backup files to keep
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)  # handlers enforce levels

    ctx_filter = ContextInjectFilter()

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    ch.addFilter(ctx_filter)
    root.addHandler(ch)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        fh.addFilter(ctx_filter)
        root.addHandler(fh)

    for name, level in THIRD_PARTY_LEVELS.items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured (console_level=%s, file=%s)",
        logging.getLevelName(console_level),
        str(log_file) if log_file is not None else "None",
    )
