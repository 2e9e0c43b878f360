"""
Utility functions and configuration for tagdump.
"""

import os
import sys
import shutil
import signal
import logging
from pathlib import Path
from typing import List, Optional
from logging.handlers import RotatingFileHandler

# ---------- Constants ----------
EXIT_CODE_SUCCESS = 0
EXIT_CODE_ERROR = 1
EXIT_CODE_USAGE = 2
EXIT_CODE_NO_FILE = 3
EXIT_CODE_UNSUPPORTED = 4
EXIT_CODE_INTERRUPTED = 130

# ---------- Configuration ----------
class Config:
    """Configuration management with validation."""
    DEFAULT_WIDTH = 80  # used when the terminal cannot report its size
    VALUE_INDENT = 4
    DEFAULT_VERBOSE = False
    LOG_DIR: Optional[str] = None

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        if cls.DEFAULT_WIDTH <= 0:
            raise ValueError("DEFAULT_WIDTH must be positive")
        if cls.VALUE_INDENT < 0:
            raise ValueError("VALUE_INDENT cannot be negative")
        if cls.VALUE_INDENT >= cls.DEFAULT_WIDTH:
            raise ValueError("VALUE_INDENT must be smaller than DEFAULT_WIDTH")
        if cls.LOG_DIR is not None and not cls.LOG_DIR.strip():
            raise ValueError("LOG_DIR cannot be blank")

    @classmethod
    def load_from_env(cls) -> None:
        """Load configuration from environment variables, updating class attributes."""
        try:
            if os.getenv('TAGDUMP_WIDTH'):
                cls.DEFAULT_WIDTH = int(os.getenv('TAGDUMP_WIDTH'))
            if os.getenv('TAGDUMP_INDENT'):
                cls.VALUE_INDENT = int(os.getenv('TAGDUMP_INDENT'))
        except ValueError as e:
            raise ValueError(f"Invalid numeric setting in environment: {e}")
        if os.getenv('TAGDUMP_LOG_DIR'):
            cls.LOG_DIR = os.getenv('TAGDUMP_LOG_DIR')
        verbose_env = os.getenv('TAGDUMP_VERBOSE', '').lower()
        cls.DEFAULT_VERBOSE = verbose_env in ('1', 'true', 'yes')
        cls.validate()

# ---------- Logging Setup ----------
def setup_logging(verbose: bool = False) -> None:
    """Configure logging; stdout is reserved for the tag dump itself."""
    log_level = logging.DEBUG if verbose else logging.WARNING

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if Config.LOG_DIR:
        log_dir = Path(Config.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_dir / 'tagdump.log',
            maxBytes=10*1024*1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        ))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

# ---------- Small Helpers ----------
def get_terminal_width() -> int:
    """Return the console width, or Config.DEFAULT_WIDTH when it cannot be determined."""
    columns = shutil.get_terminal_size(fallback=(Config.DEFAULT_WIDTH, 24)).columns
    if columns <= 0:
        return Config.DEFAULT_WIDTH
    return columns

# ---------- Signal Handlers ----------
def register_signal_handlers() -> None:
    """Register signal handlers for a clean exit on Ctrl+C/SIGTERM."""
    def signal_handler(sig, frame):
        logging.getLogger(__name__).info(f"Received signal {sig}, exiting")
        sys.exit(EXIT_CODE_INTERRUPTED)

    # Windows has limited signal support
    if sys.platform != "win32":
        try:
            signal.signal(signal.SIGINT, signal_handler)
            signal.signal(signal.SIGTERM, signal_handler)
        except ValueError:
            # only the main thread may install handlers
            pass

def unregister_signal_handlers() -> None:
    """Restore default signal handling."""
    if sys.platform != "win32":
        try:
            signal.signal(signal.SIGINT, signal.default_int_handler)
            signal.signal(signal.SIGTERM, signal.SIG_DFL)
        except ValueError:
            pass
