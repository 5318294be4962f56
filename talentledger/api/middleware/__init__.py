"""
API middleware: error translation and request logging.
"""

from .error_handler import setup_exception_handlers
from .logging import setup_logging, get_request_id

__all__ = ["setup_exception_handlers", "setup_logging", "get_request_id"]
