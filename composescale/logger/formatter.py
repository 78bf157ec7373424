from logging import Formatter

class DelimitedFormatter(Formatter):
    """Formats list-like log messages as a single delimited row."""

    def __init__(self, message_format=None, datefmt=None, delimiter=",", float_precision=2):
        super().__init__(message_format, datefmt)
        self.delimiter = delimiter
        self.float_precision = float_precision

    def _cell(self, value):
        if value is None:
            return ""
        if isinstance(value, float):
            return f"{value:.{self.float_precision}f}"
        return str(value)

    def delimit_message(self, msg):
        """Join list-like messages into a row, leave anything else as its string form."""
        if isinstance(msg, (list, tuple)):
            return self.delimiter.join(self._cell(v) for v in msg)
        return str(msg)

    def format(self, record):
        record.msg = self.delimit_message(record.msg)
        return super().format(record)
