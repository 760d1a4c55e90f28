"""
Общие утилиты, константы и логгер.
"""

from travel_pool.common.logger import get_logger, log_info, log_error, log_warning, log_debug, setup_logging
from travel_pool.common.constants import TypeMsg

__all__ = [
    "get_logger",
    "log_info",
    "log_error",
    "log_warning",
    "log_debug",
    "setup_logging",
    "TypeMsg",
]
