"""Custom exceptions for MicroLens."""

from typing import Optional, Dict, Any


class MicroLensException(Exception):
    """Base exception for MicroLens."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationException(MicroLensException):
    """Raised when configuration is invalid."""
    pass


class ClientConnectionException(MicroLensException):
    """Raised when client connections fail."""
    
    def __init__(self, client_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.client_type = client_type
        super().__init__(f"{client_type} connection failed: {message}", details)


class ResourceFetchException(MicroLensException):
    """Raised when listing or reading a cluster resource fails."""
    
    def __init__(self, resource_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.resource_type = resource_type
        super().__init__(f"error getting {resource_type}: {message}", details)


class NamespaceNotFoundException(MicroLensException):
    """Raised when an explicitly requested namespace does not exist."""
    
    def __init__(self, namespace: str, details: Optional[Dict[str, Any]] = None):
        self.namespace = namespace
        super().__init__(f"namespace '{namespace}' not found", details)
