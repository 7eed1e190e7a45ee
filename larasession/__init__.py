"""
larasession
Laravel-style, prefix-scoped session access for Sanic
"""

from larasession.helpers import session
from larasession.session import Session, SessionManager, SessionStore
from larasession.exceptions import SessionConfigurationException

__all__ = [
    'session',
    'Session',
    'SessionManager',
    'SessionStore',
    'SessionConfigurationException',
]
