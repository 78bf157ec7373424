import logging
import sys

from composescale.constants import CSCALE_CSV, CSCALE_FILE, CSCALE_STDOUT, DEFAULT_FMT
from composescale.logger.rotator import LogFileRotator
from pathlib import Path

def get_base_logger(name=None, level=CSCALE_STDOUT, handlers=None, formatter=None, stream=None):
    """Create a logger that writes to the console, or to the given handlers."""

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Loggers are process-wide; rebuilding one replaces its sinks instead of doubling them.
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    if not handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(formatter or logging.Formatter(fmt=DEFAULT_FMT))
        handlers = [handler]
    elif not isinstance(handlers, (list, tuple)):
        handlers = [handlers]

    for handler in handlers:
        logger.addHandler(handler)

    return logger

def get_file_logger(name, dirname="logs", level=CSCALE_FILE, mode="a"):
    """Create a logger that mirrors progress lines into `<dirname>/<name>.log`."""

    filename = Path(dirname) / f"{name}.log"
    filename.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(filename, mode=mode)
    handler.setFormatter(logging.Formatter(fmt=DEFAULT_FMT))

    return get_base_logger(name, level=level, handlers=handler)

def get_csv_logger(name, dirname="logs", header=None, level=CSCALE_CSV, mode="a", delimiter=",",
                   datefmt="%Y/%m/%d %H:%M:%S", max_size=0, backup_count=0):
    """Create a logger that appends delimited rows to `<dirname>/<name>.csv`."""

    message_format = f"%(asctime)s.%(msecs)03d{delimiter}%(message)s"

    filename = Path(dirname) / f"{name}.csv"
    filename.parent.mkdir(parents=True, exist_ok=True)

    # The time column is prepended by the format, so it leads the header too.
    header = ["timestamp", *header] if header else None
    handler = LogFileRotator(str(filename), message_format=message_format, datefmt=datefmt, max_size=max_size,
                             backup_count=backup_count, header=header, delimiter=delimiter, mode=mode)

    logger = get_base_logger(name, level=level, handlers=handler)
    # Rows belong in the CSV only, never on the root logger's console output.
    logger.propagate = False
    return logger
