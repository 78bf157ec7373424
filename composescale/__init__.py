__version__ = "0.1.0"

from . import auto_scaling
from . import backend
from . import logger

__all__ = [
    "auto_scaling",
    "backend",
    "logger",
]
