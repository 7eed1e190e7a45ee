"""
Session Management Package
Prefix-scoped session access over pluggable storage drivers
"""
from larasession.session.session import Session
from larasession.session.session_manager import SessionManager, SessionStatus
from larasession.session.store import SessionStore
from larasession.session.driver_registry import SessionDriverRegistry, default_registry
from larasession.session.stores import (
    ArraySessionStore,
    FileSessionStore,
    CookieSessionStore,
    RedisSessionStore,
)

__all__ = [
    'Session',
    'SessionManager',
    'SessionStatus',
    'SessionStore',
    'SessionDriverRegistry',
    'default_registry',
    'ArraySessionStore',
    'FileSessionStore',
    'CookieSessionStore',
    'RedisSessionStore',
]
