from .scale_logger import ScaleLogger

__all__ = ["ScaleLogger"]
