import logging

from composescale.logger.formatter import DelimitedFormatter
from logging.handlers import RotatingFileHandler
from os import path

class LogFileRotator(RotatingFileHandler):
    """Rotating CSV handler that writes the header at the top of every file it opens."""

    def __init__(self, filename, message_format=None, datefmt=None, max_size=0, backup_count=0,
                 header=None, delimiter=",", mode="a", **kwargs):
        is_new = mode == "w" or not path.exists(filename) or path.getsize(filename) == 0
        super().__init__(filename, maxBytes=max_size, backupCount=backup_count, mode=mode, **kwargs)

        self.setFormatter(DelimitedFormatter(message_format, datefmt, delimiter))
        self._header = self.formatter.delimit_message(header) if header else None

        if self.stream and is_new and self._header:
            self.stream.write(self._header + "\n")
            self.stream.flush()

    def doRollover(self):
        """Rotate the file and start the new one with the header row."""

        super().doRollover()

        if not self._header or not self.stream:
            return

        # Written straight to the stream so the header skips the asctime/name prefix.
        self.stream.write(self._header + "\n")
        self.stream.flush()

    def emit(self, record: logging.LogRecord):
        # The base handler opens lazily when delay=True; the header must still lead.
        if self.stream is None and self._header and not path.exists(self.baseFilename):
            self.stream = self._open()
            self.stream.write(self._header + "\n")
        super().emit(record)
