# utils/__init__.py

from utils.logger import logger, setup_logger
from utils.config import load_cfg

__all__ = ["logger", "setup_logger", "load_cfg"]
