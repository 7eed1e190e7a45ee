"""
Exceptions Package
"""
from larasession.exceptions.custom import (
    FrameworkException,
    SessionException,
    SessionConfigurationException,
)

__all__ = [
    'FrameworkException',
    'SessionException',
    'SessionConfigurationException',
]
