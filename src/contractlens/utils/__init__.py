"""
ContractLens Utils Package

This package contains utility functions and helper modules:
- Logger: logger setup shared by the CLI and analyzers
- Error Handling: exception hierarchy and the log-and-continue decorator
"""

from .error_handling import (
    ContractLensError,
    ExplorerError,
    ResourceError,
    ValidationError,
    error_to_payload,
    handle_exceptions,
)
from .logger import get_logger, setup_logger

__all__ = [
    'ContractLensError',
    'ExplorerError',
    'ResourceError',
    'ValidationError',
    'error_to_payload',
    'handle_exceptions',
    'get_logger',
    'setup_logger',
]
