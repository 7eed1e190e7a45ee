import pytest

from larasession.exceptions import SessionConfigurationException
from larasession.session import (
    ArraySessionStore,
    CookieSessionStore,
    FileSessionStore,
    RedisSessionStore,
    Session,
    SessionDriverRegistry,
    SessionManager,
    default_registry,
)


class NotAStore:
    def __init__(self, config):
        self.config = config


def test_default_registry_has_builtin_drivers():
    assert default_registry().names() == ["Array", "Cookie", "File", "Redis"]


@pytest.mark.parametrize("identifier, expected", [
    ("array", ArraySessionStore),
    ("Array", ArraySessionStore),
    ("file", FileSessionStore),
    ("redis", RedisSessionStore),
])
def test_conventional_names_resolve(identifier, expected):
    assert default_registry().resolve(identifier) is expected


def test_fully_qualified_identifier_resolves():
    registry = SessionDriverRegistry()
    store = registry.create("larasession.session.stores.ArraySessionStore", {"expire": 60})

    assert isinstance(store, ArraySessionStore)
    assert store.lifetime == 60


def test_unknown_driver_fails_closed():
    with pytest.raises(SessionConfigurationException) as exc_info:
        default_registry().resolve("memcached")

    assert exc_info.value.driver == "memcached"
    assert "memcached" in str(exc_info.value)


def test_unknown_fully_qualified_driver_fails_closed():
    with pytest.raises(SessionConfigurationException) as exc_info:
        default_registry().resolve("myapp.sessions.MissingStore")

    assert exc_info.value.driver == "myapp.sessions.MissingStore"


def test_factory_must_build_a_session_store():
    registry = SessionDriverRegistry()
    registry.register("bogus", NotAStore)

    with pytest.raises(SessionConfigurationException):
        registry.create("bogus", {})


def test_driver_rejecting_config_is_fatal():
    # cookie driver needs a signing secret
    with pytest.raises(SessionConfigurationException) as exc_info:
        default_registry().create("cookie", {})

    assert exc_info.value.driver == "cookie"


def test_custom_driver_registered_by_short_name():
    registry = default_registry()
    registry.register("in_memory", ArraySessionStore)

    assert registry.has("in_memory")
    assert "InMemory" in registry.names()


def test_shared_registry_reuses_instances():
    shared = default_registry(shared=True)
    assert shared.create("array", {}) is shared.create("array", {})

    fresh = default_registry()
    assert fresh.create("array", {}) is not fresh.create("array", {})


def test_accessor_registers_configured_driver(tmp_path):
    manager = SessionManager()
    Session(manager, config={"type": "file", "path": str(tmp_path)})

    assert isinstance(manager.handler, FileSessionStore)
    assert manager.handler.path == tmp_path


def test_accessor_cookie_driver_with_secret():
    manager = SessionManager()
    Session(manager, config={"type": "cookie", "secret": "s3cret"})
    assert isinstance(manager.handler, CookieSessionStore)


def test_accessor_construction_fails_on_unknown_driver():
    with pytest.raises(SessionConfigurationException) as exc_info:
        Session(SessionManager(), config={"type": "nope"})
    assert exc_info.value.driver == "nope"


@pytest.mark.asyncio
async def test_accessor_construction_fails_when_handler_rejected():
    manager = SessionManager()
    await manager.start()

    with pytest.raises(SessionConfigurationException) as exc_info:
        Session(manager, config={"type": "array"})

    assert exc_info.value.driver == "array"
