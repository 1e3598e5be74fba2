"""
Shared error handling for the Dynamic Logic service.
"""

from typing import Dict, Any, Optional


class DynamicLogicException(Exception):
    """Base exception for Dynamic Logic components."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(DynamicLogicException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class DefinitionError(DynamicLogicException):
    """Malformed dynamic logic definitions."""

    def __init__(self, message: str = "Invalid definitions", details: Optional[Dict[str, Any]] = None):
        super().__init__("DEFINITION_ERROR", message, details)
