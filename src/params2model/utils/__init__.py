"""Utility modules for Params2Model."""

from params2model.utils.loading import import_schema
from params2model.utils.logging_setup import get_logger, setup_logging

__all__ = ["setup_logging", "get_logger", "import_schema"]
