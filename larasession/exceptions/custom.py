"""
Custom Exception Classes
Framework-specific exceptions with HTTP status codes
"""
from typing import Optional


class FrameworkException(Exception):
    """Base exception for all framework exceptions"""
    status_code = 500
    message = "An error occurred"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.__class__.message
        self.status_code = status_code or self.__class__.status_code
        super().__init__(self.message)


class SessionException(FrameworkException):
    """Base exception for session subsystem errors"""
    message = "Session error"


class SessionConfigurationException(SessionException):
    """
    Session configuration exception

    Raised when the configured storage driver cannot be resolved,
    instantiated or registered as the active save handler

    Example:
        raise SessionConfigurationException(driver='memcached')
    """
    message = "Invalid session configuration"

    def __init__(
        self,
        message: Optional[str] = None,
        driver: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        if message is None and driver is not None:
            message = f"error session handler: {driver}"
        super().__init__(message, status_code)
        self.driver = driver
