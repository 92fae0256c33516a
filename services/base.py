"""
Base service interface for business logic layer.
Services orchestrate business operations using the record store and repositories.
"""

from abc import ABC
import logging


class BaseService(ABC):
    """
    Base service providing common functionality.
    All service classes should inherit from this class.
    """

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    @staticmethod
    def _format(message: str, fields: dict) -> str:
        extra_data = " ".join([f"{k}={v}" for k, v in fields.items()])
        return f"{message} {extra_data}".strip()

    def log_info(self, message: str, **kwargs):
        """Log info message with structured data"""
        self.logger.info(self._format(message, kwargs))

    def log_warning(self, message: str, **kwargs):
        """Log warning message with structured data"""
        self.logger.warning(self._format(message, kwargs))

    def log_error(self, message: str, **kwargs):
        """Log error message with structured data"""
        self.logger.error(self._format(message, kwargs))
