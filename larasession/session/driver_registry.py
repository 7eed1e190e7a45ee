"""
Session Driver Registry
Maps storage driver identifiers to store factories
"""
from typing import Any, Callable, Dict, Mapping, Optional
from larasession.exceptions import SessionConfigurationException
from larasession.logging import getLogger
from larasession.session.store import SessionStore
from larasession.support import ClassLoader, Str

logger = getLogger(__name__)

StoreFactory = Callable[[Mapping[str, Any]], SessionStore]


class SessionDriverRegistry:
    """
    Registry of session storage drivers

    Identifiers are resolved two ways:
    - containing a '.': fully qualified class path, loaded with ClassLoader
    - otherwise: conventional name, the StudlyCase form of the identifier
      ('file' -> 'File', 'redis_cluster' -> 'RedisCluster')

    Unknown identifiers fail closed with SessionConfigurationException.

    Example:
        registry = SessionDriverRegistry()
        registry.register('Database', DatabaseSessionStore)
        store = registry.create('database', {'table': 'sessions'})
    """

    def __init__(self, shared: bool = False):
        """
        Args:
            shared: Reuse one store instance per identifier across create()
                calls (long-running servers share driver state and locks)
        """
        self.shared = shared
        self._factories: Dict[str, StoreFactory] = {}
        self._instances: Dict[str, SessionStore] = {}

    @staticmethod
    def conventional_name(identifier: str) -> str:
        return Str.studly(identifier)

    def register(self, name: str, factory: StoreFactory) -> None:
        """
        Register a driver factory

        Args:
            name: Driver identifier (normalized to its conventional name)
            factory: Callable taking the session config and returning a store
        """
        self._factories[self.conventional_name(name)] = factory

    def has(self, identifier: str) -> bool:
        """Check if a conventional driver is registered"""
        return self.conventional_name(identifier) in self._factories

    def names(self) -> list:
        """Registered conventional driver names"""
        return sorted(self._factories)

    def resolve(self, identifier: str) -> StoreFactory:
        """
        Resolve a driver identifier to its factory

        Raises:
            SessionConfigurationException: If the driver cannot be found
        """
        if '.' in identifier:
            try:
                return ClassLoader.load(identifier)
            except (ImportError, AttributeError, ValueError) as e:
                logger.error(f"Session driver class not found: {identifier} ({e})")
                raise SessionConfigurationException(driver=identifier) from e

        name = self.conventional_name(identifier)
        factory = self._factories.get(name)
        if factory is None:
            logger.error(f"Unknown session driver: {identifier}")
            raise SessionConfigurationException(driver=identifier)

        return factory

    def create(self, identifier: str, config: Optional[Mapping[str, Any]] = None) -> SessionStore:
        """
        Instantiate a driver with the session config

        Raises:
            SessionConfigurationException: If the driver is unknown, fails to
                construct, or does not implement SessionStore
        """
        if self.shared and identifier in self._instances:
            return self._instances[identifier]

        factory = self.resolve(identifier)

        try:
            store = factory(dict(config or {}))
        except (TypeError, ValueError) as e:
            logger.error(f"Session driver {identifier} rejected its configuration: {e}")
            raise SessionConfigurationException(driver=identifier) from e

        if not isinstance(store, SessionStore):
            raise SessionConfigurationException(driver=identifier)

        if self.shared:
            self._instances[identifier] = store

        return store

    async def close(self) -> None:
        """Disconnect shared stores that hold a connection"""
        instances = list(self._instances.values())
        self._instances.clear()

        for store in instances:
            disconnect = getattr(store, 'disconnect', None)
            if disconnect is not None:
                await disconnect()


def default_registry(shared: bool = False) -> SessionDriverRegistry:
    """Registry populated with the built-in drivers"""
    from larasession.session.stores import (
        ArraySessionStore,
        CookieSessionStore,
        FileSessionStore,
        RedisSessionStore,
    )

    registry = SessionDriverRegistry(shared=shared)
    registry.register('array', ArraySessionStore)
    registry.register('file', FileSessionStore)
    registry.register('cookie', CookieSessionStore)
    registry.register('redis', RedisSessionStore)
    return registry
