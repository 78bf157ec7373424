import logging

from composescale.constants import CSCALE_CSV, CSCALE_FILE, CSCALE_STDOUT, DECISION_CSV_HEADER
from composescale.logger.factory import get_base_logger, get_csv_logger, get_file_logger

class ScaleLogger:
    """
    Progress output for the scaler: console lines, an optional text log mirroring them,
    and an optional CSV with one row per scaling decision.
    """

    def __init__(self, name="composescale", dirname=None, level=CSCALE_STDOUT, csv_header=DECISION_CSV_HEADER, stream=None):
        self.name = name
        self._std_log = get_base_logger(f"std_{name}", level, stream=stream)

        # File sinks exist only when a log directory was asked for.
        self._file_log = get_file_logger(f"file_{name}", dirname) if dirname else None
        self._csv_log = get_csv_logger(f"csv_{name}", dirname, header=csv_header) if dirname else None

    def setLevel(self, level):
        for logger in (self._std_log, self._file_log, self._csv_log):
            if logger is not None:
                logger.setLevel(level)

    def _log(self, logger, level, message, *args, **kwargs):
        if logger is not None and logger.isEnabledFor(level):
            logger._log(level, message, args, **kwargs)

    def std_log(self, message, *args, **kwargs):
        self._log(self._std_log, CSCALE_STDOUT, message, *args, **kwargs)
        self._log(self._file_log, CSCALE_FILE, message, *args, **kwargs)

    def warn_log(self, message, *args, **kwargs):
        self._log(self._std_log, logging.WARNING, message, *args, **kwargs)
        self._log(self._file_log, logging.WARNING, message, *args, **kwargs)

    def file_log(self, message, *args, **kwargs):
        self._log(self._file_log, CSCALE_FILE, message, *args, **kwargs)

    def csv_log(self, row):
        self._log(self._csv_log, CSCALE_CSV, list(row))
