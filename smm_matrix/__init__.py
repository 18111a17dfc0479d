"""smm_matrix.__init__
======================
Mini-README: This package initialises the SMM Matrix application namespace. It exposes
the cached settings accessor and the logger factory so every module shares the same
configuration and log formatting.
"""

from .config import get_settings
from .logger import get_logger

__all__ = ["get_settings", "get_logger"]
