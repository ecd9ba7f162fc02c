import logging
import os
import sys
from collections.abc import Callable
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from dotenv import load_dotenv
from rich.logging import RichHandler

# Load environment variables from the project root .env (if present)
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


# --- Logging Configuration ---
# runtime modules should use logging.getLogger(...) and env LOG_LEVEL
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "hardsub.log"
_logging_configured = False
# Handlers added by setup_logging, replaced on a forced reconfiguration
_installed_handlers: list[logging.Handler] = []


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    if not value:
        return default
    name = value.strip().upper()
    level = getattr(logging, name, default)
    return level if isinstance(level, int) else default


def _build_console_handler(level: int, isatty: Callable[[], bool] | None = None) -> logging.Handler:
    """Return a console handler. Use Rich in TTY, plain stream otherwise."""
    is_tty = (isatty or sys.stderr.isatty)()
    if is_tty:
        handler: logging.Handler = RichHandler(
            show_time=False,
            show_path=False,
            rich_tracebacks=True,
            show_level=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)
    return handler


def _parse_backup_count(raw: str | None, default: int = 5) -> int:
    try:
        return max(0, int(str(raw).strip()))
    except (TypeError, ValueError):
        logging.warning("Invalid APP_LOG_BACKUP_COUNT=%r. Defaulting to %d.", raw, default)
        return default


def setup_logging(force: bool = False) -> None:
    """Configure the root logger once with console and optional file handler.

    With ``force=True`` the handlers from a previous call are removed and
    closed before new ones are installed.
    """
    global _logging_configured
    if _logging_configured and not force:
        return

    level = _parse_level(os.getenv("LOG_LEVEL", "INFO"))

    root = logging.getLogger()
    root.setLevel(level)
    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    console_handler = _build_console_handler(level)
    root.addHandler(console_handler)
    _installed_handlers.append(console_handler)

    # Optional file logging only when APP_LOG_DIR is set
    app_log_dir = os.getenv("APP_LOG_DIR")
    if app_log_dir:
        log_dir = Path(app_log_dir)
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = TimedRotatingFileHandler(
                filename=log_dir / LOG_FILE_NAME,
                when="midnight",
                backupCount=_parse_backup_count(os.getenv("APP_LOG_BACKUP_COUNT", "5")),
                encoding="utf-8",
                utc=True,
            )
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            file_handler.setLevel(level)
            root.addHandler(file_handler)
            _installed_handlers.append(file_handler)
        except (PermissionError, OSError) as e:
            logging.warning("Failed to configure file logging to '%s'. Error: %s", app_log_dir, e)

    # Forward warnings module messages to logging
    logging.captureWarnings(True)

    _logging_configured = True


# --- End Logging Configuration ---
