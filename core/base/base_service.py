"""
Base service interface for business logic layer.
Services orchestrate business operations using the local store.
"""

from typing import Generic, TypeVar
from abc import ABC
import logging

StoreType = TypeVar("StoreType")


def format_context(message: str, **kwargs) -> str:
    """Render `message key=value ...` the way every service logs"""
    extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items() if v is not None])
    return f"{message} {extra_data}".strip()


class BaseService(Generic[StoreType], ABC):
    """
    Base service providing common functionality.
    Stateful services (processors, coordinators) inherit from this class.
    """

    def __init__(self, store: StoreType, logger_name: str):
        self.store = store
        self.logger = logging.getLogger(logger_name)

    def log_debug(self, message: str, **kwargs):
        """Log debug message with structured data"""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(format_context(message, **kwargs))

    def log_info(self, message: str, **kwargs):
        """Log info message with structured data"""
        self.logger.info(format_context(message, **kwargs))

    def log_warning(self, message: str, **kwargs):
        """Log warning message with structured data"""
        self.logger.warning(format_context(message, **kwargs))

    def log_error(self, message: str, **kwargs):
        """Log error message with structured data"""
        self.logger.error(format_context(message, **kwargs))
