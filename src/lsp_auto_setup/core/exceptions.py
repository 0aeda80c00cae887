"""
Exception classes for LSP Auto Setup.

Defines the exception hierarchy for the errors that can occur while
resolving options, locating the server registry and preparing
individual servers for activation.
"""

from typing import Any, Dict, Optional


class LspAutoSetupError(Exception):
    """Base exception for all LSP Auto Setup errors."""
    
    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize LspAutoSetupError.
        
        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        
    def __str__(self) -> str:
        """String representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message
        
    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigError(LspAutoSetupError):
    """Configuration-related errors."""
    pass


class RegistryNotFoundError(ConfigError):
    """The server registry could not be located in the search paths."""
    pass


class ServerConfigError(LspAutoSetupError):
    """Error while preparing the configuration of a single server."""
    
    def __init__(
        self,
        identifier: str,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize ServerConfigError.
        
        Args:
            identifier: Server the error belongs to
            message: Error message
            error_code: Optional error code
            details: Optional additional details
        """
        super().__init__(
            f"Error while setting up {identifier}: {message}",
            error_code,
            details,
        )
        self.identifier = identifier
