"""
Framework Helper Functions
Centralized user-facing helpers for easy access throughout the application
"""
from contextvars import ContextVar
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from larasession.session import Session

# Accessor bound to the request being handled (async-task local)
_current_session: ContextVar[Optional['Session']] = ContextVar('current_session', default=None)


def set_current_session(accessor: Optional['Session']) -> None:
    """Bind the accessor for the current request (None unbinds)"""
    _current_session.set(accessor)


def session(key: str = None, default: Any = None) -> Any:
    """
    Get session value or the session accessor

    Args:
        key: Session key, dotted keys allowed (optional)
        default: Default value if key not found

    Returns:
        Session value or the Session accessor

    Example:
        session('user.id')
        session('cart', [])
        session().set('cart', [])
    """
    accessor = _current_session.get()
    if accessor is None:
        raise RuntimeError("Session not available. Make sure SessionMiddleware is registered.")

    if key is None:
        return accessor

    value = accessor.get(key)
    return default if value is None else value
