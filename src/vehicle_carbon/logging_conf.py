import logging
import sys
import os
from typing import Optional

import colorama
from colorama import Fore, Style


class ColoredFormatter(logging.Formatter):
    """
    Custom formatter to add colors to log levels for console output.
    INFO keeps the plain "print" feel; WARNING and above carry their level name.
    """
    def __init__(self, fmt: str, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

        self.COLORS = {
            logging.DEBUG: Fore.BLUE,
            logging.INFO: Fore.GREEN,
            logging.WARNING: Fore.YELLOW,
            logging.ERROR: Fore.RED,
            logging.CRITICAL: Fore.RED + Style.BRIGHT,
        }

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            message = f"{record.levelname}: {message}"
        if self.use_color:
            color = self.COLORS.get(record.levelno, "")
            message = f"{color}{message}{Style.RESET_ALL}"

        # Format a copy so other handlers sharing the record see it untouched
        styled = logging.makeLogRecord(record.__dict__)
        styled.msg = message
        styled.args = None
        return super().format(styled)


def setup_logging(
    console_level: int = logging.INFO,
    file_path: Optional[str] = None,
    file_level: int = logging.DEBUG,
    no_color: bool = False
) -> logging.Logger:
    """
    Sets up the root logger with:
    - Console handler (colored, formatting based on level)
    - Optional File handler (clean text, detailed format)
    """
    colorama.init(autoreset=True)

    # Check environment variable for color disable
    if os.environ.get("NO_COLOR"):
        no_color = True

    # 1. Configure Root Logger
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)  # Capture all, handlers filter

    # Remove existing handlers if any (to avoid duplicates on reload)
    if logger.hasHandlers():
        logger.handlers.clear()

    # 2. Console Handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)

    is_tty = sys.stdout.isatty() if hasattr(sys.stdout, "isatty") else False
    use_color = is_tty and not no_color

    console_handler.setFormatter(ColoredFormatter("%(message)s", use_color=use_color))
    logger.addHandler(console_handler)

    # 3. File Handler (Optional)
    if file_path:
        file_handler = logging.FileHandler(file_path, mode='w', encoding='utf-8')
        file_handler.setLevel(file_level)
        file_fmt = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_fmt)
        logger.addHandler(file_handler)

    return logger
