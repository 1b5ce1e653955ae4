"""
Utility modules for the appraisal service.
"""

from .formatting import format_currency, format_percent
from .config import Config
from .logging_config import setup_logging

__all__ = ["format_currency", "format_percent", "Config", "setup_logging"]
