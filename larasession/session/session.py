"""
Session Accessor
Prefix-scoped access to the session bag with lifecycle control
"""
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union
from larasession.defaults import SESSION_KEY_SEPARATOR
from larasession.exceptions import SessionConfigurationException
from larasession.logging import getLogger
from larasession.session.driver_registry import SessionDriverRegistry, default_registry
from larasession.session.session_manager import SessionManager
from larasession.support import Config

logger = getLogger(__name__)


class Session:
    """
    Session accessor

    Reads and writes the bag owned by a SessionManager, optionally scoped
    under a prefix. Dotted names address one level of nesting:

        session.set_prefix('app')
        session.set('user.id', 42)     # bag['app']['user']['id'] = 42
        session.get('user.id')         # 42
        session.get()                  # {'user': {'id': 42}}

    A name is split on its first separator only, so 'a.b.c' addresses
    bag['a']['b.c']. A leading separator ('.a') is not a split point.

    Every accessor method takes an optional prefix override: None means
    "use the instance prefix", '' means "no prefix".
    """

    def __init__(
        self,
        manager: SessionManager,
        config: Optional[Mapping[str, Any]] = None,
        request_params: Optional[Mapping[str, Any]] = None,
        registry: Optional[SessionDriverRegistry] = None,
    ):
        """
        Initialize the accessor and apply configuration to the manager

        Args:
            manager: Session subsystem owning the bag
            config: Session options (loaded from Config 'session' if omitted)
            request_params: Request parameters, for the session id override
            registry: Storage driver registry (built-in drivers if omitted)

        Raises:
            SessionConfigurationException: If the storage driver cannot be
                resolved or registered
        """
        self.manager = manager
        self.config: Dict[str, Any] = {}
        self.request_params = request_params or {}
        self.registry = registry or default_registry()
        self.auto_start = False
        self._prefix = ''

        self.import_config(config)
        self._initialize()

    def import_config(self, config: Optional[Mapping[str, Any]]) -> None:
        """Apply config only if none is set yet (first write wins)"""
        if isinstance(config, Mapping) and not self.config:
            self.config = dict(config)

    def _initialize(self) -> None:
        """Push configuration into the session subsystem"""
        if not self.config:
            self.config = Config.section('session')

        config = self.config
        manager = self.manager

        self.auto_start = bool(config.get('session_on'))

        if config.get('prefix') is not None and not self._prefix:
            self._prefix = str(config['prefix'])

        var_session_id = config.get('var_session_id')
        if var_session_id and self.request_params.get(var_session_id):
            manager.set_id(self.request_params.get(var_session_id))
        elif config.get('id'):
            manager.set_id(config['id'])

        if config.get('name') is not None:
            manager.set_name(config['name'])

        if config.get('path') is not None:
            manager.set_save_path(config['path'])

        if config.get('domain') is not None:
            manager.set_cookie_params(domain=config['domain'])

        if config.get('expire') is not None:
            manager.set_gc_maxlifetime(config['expire'])
            manager.set_cookie_params(lifetime=config['expire'])

        if config.get('secure') is not None:
            manager.set_cookie_params(secure=config['secure'])

        if config.get('httponly') is not None:
            manager.set_cookie_params(httponly=config['httponly'])

        if config.get('cookie_path') is not None:
            manager.set_cookie_params(path=config['cookie_path'])

        if config.get('samesite') is not None:
            manager.set_cookie_params(samesite=config['samesite'])

        driver = config.get('type')
        if driver:
            store = self.registry.create(driver, config)
            if not manager.set_save_handler(store):
                logger.error(f"Session handler rejected: {driver}")
                raise SessionConfigurationException(driver=driver)

        logger.debug(
            "Session configured",
            extra={'driver': type(manager.handler).__name__, 'auto_start': self.auto_start},
        )

    # === Prefix ===

    def get_prefix(self) -> str:
        """Current namespace prefix ('' when unscoped)"""
        return self._prefix

    def set_prefix(self, prefix: Optional[str]) -> None:
        """Scope subsequent calls under prefix ('' or None removes scoping)"""
        self._prefix = prefix or ''

    def prefix(self, prefix: Optional[str] = None) -> Optional[str]:
        """
        Get or set the prefix in one call

        Returns the current prefix when called without a value (or with ''),
        otherwise sets it and returns None. Prefer get_prefix()/set_prefix().
        """
        if not prefix:
            return self._prefix
        self._prefix = prefix
        return None

    # === Path resolution ===

    def _resolve_prefix(self, prefix: Optional[str]) -> str:
        return prefix if prefix is not None else self._prefix

    @staticmethod
    def _split(name: Any) -> Optional[Tuple[str, str]]:
        """Split a dotted name into two segments, None for flat names"""
        if isinstance(name, str) and name.find(SESSION_KEY_SEPARATOR) > 0:
            first, second = name.split(SESSION_KEY_SEPARATOR, 1)
            return first, second
        return None

    def _scope(self, prefix: str, create: bool = False) -> Optional[Dict[str, Any]]:
        """Mapping addressed by prefix (the bag itself when unscoped)"""
        bag = self.manager.bag
        if not prefix:
            return bag

        scope = bag.get(prefix)
        if isinstance(scope, dict):
            return scope
        if create:
            scope = bag[prefix] = {}
            return scope
        return None

    # === Data access ===

    def set(self, name: str, value: Any = '', prefix: Optional[str] = None) -> None:
        """
        Store a value

        Args:
            name: Key, or 'outer.inner' for one level of nesting
            value: Value to store
            prefix: Prefix override
        """
        scope = self._scope(self._resolve_prefix(prefix), create=True)
        segments = self._split(name)

        if segments:
            first, second = segments
            inner = scope.get(first)
            if not isinstance(inner, dict):
                inner = scope[first] = {}
            inner[second] = value
        else:
            scope[name] = value

    def get(self, name: str = '', prefix: Optional[str] = None) -> Any:
        """
        Read a value

        Args:
            name: Key or dotted key; empty for the whole scope
            prefix: Prefix override

        Returns:
            The value, None when any path segment is missing, or a copy of
            the whole scope when name is empty
        """
        prefix = self._resolve_prefix(prefix)
        scope = self._scope(prefix)

        if not name:
            return dict(scope) if scope else {}

        if scope is None:
            return None

        segments = self._split(name)
        if segments:
            first, second = segments
            inner = scope.get(first)
            return inner.get(second) if isinstance(inner, dict) else None

        return scope.get(name)

    def all(self, prefix: Optional[str] = None) -> Dict[str, Any]:
        """Whole scope as a dict"""
        return self.get('', prefix)

    def has(self, name: str, prefix: Optional[str] = None) -> bool:
        """
        Check whether a key is set

        A key holding None counts as not set.
        """
        if not name:
            return False
        return self.get(name, prefix) is not None

    def delete(self, name: Union[str, Iterable[str]], prefix: Optional[str] = None) -> None:
        """
        Remove one key or several keys

        Args:
            name: Key, dotted key, or any iterable of them
            prefix: Prefix override, shared by every key in a list
        """
        prefix = self._resolve_prefix(prefix)

        if not isinstance(name, str) and isinstance(name, Iterable):
            for key in list(name):
                self.delete(key, prefix)
            return

        scope = self._scope(prefix)
        if scope is None:
            return

        segments = self._split(name)
        if segments:
            first, second = segments
            inner = scope.get(first)
            if isinstance(inner, dict):
                inner.pop(second, None)
        else:
            scope.pop(name, None)

    def pull(self, name: str, prefix: Optional[str] = None) -> Any:
        """Get a value and remove it"""
        value = self.get(name, prefix)
        self.delete(name, prefix)
        return value

    def clear(self, prefix: Optional[str] = None) -> None:
        """Remove the prefix namespace, or everything when unscoped"""
        prefix = self._resolve_prefix(prefix)
        if prefix:
            self.manager.bag.pop(prefix, None)
        else:
            self.manager.bag.clear()

    # === Lifecycle ===

    @property
    def session_id(self) -> Optional[str]:
        return self.manager.get_id()

    async def start(self) -> bool:
        """Start the underlying session and bind the bag"""
        return await self.manager.start()

    async def destroy(self) -> bool:
        """Empty the bag and destroy the stored session"""
        self.manager.unset()
        return await self.manager.destroy()

    async def regenerate(self, delete_old: bool = False) -> str:
        """
        Move the session to a new id

        Args:
            delete_old: Remove the old stored record right away

        Returns:
            New session id
        """
        return await self.manager.regenerate_id(delete_old)

    async def pause(self) -> bool:
        """Flush the bag to storage and release the session lock"""
        return await self.manager.write_close()

    # === Dictionary Interface ===

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        self.delete(name)

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __repr__(self) -> str:
        return f"<Session prefix={self._prefix!r} manager={self.manager!r}>"
