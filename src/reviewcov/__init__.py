from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("reviewcov")

logger = logging.getLogger("reviewcov")

__all__ = ["__version__", "logger"]
