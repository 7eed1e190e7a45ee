from unittest.mock import AsyncMock, MagicMock

import pytest

from larasession.helpers import session as session_helper
from larasession.middleware import SessionMiddleware
from larasession.session import ArraySessionStore, CookieSessionStore, RedisSessionStore, Session
from larasession.session.driver_registry import default_registry
from larasession.support import Config

NO_GC = [0, 100]


@pytest.fixture
def array_config():
    return {"session_on": True, "type": "array", "name": "sid", "expire": 900, "secure": True}


@pytest.mark.asyncio
async def test_before_request_starts_session(array_config, make_request):
    middleware = SessionMiddleware(config=array_config, lottery=NO_GC)
    request = make_request()

    await middleware.before_request(request)

    accessor = request.ctx.session
    assert isinstance(accessor, Session)
    assert accessor.manager.is_active
    assert session_helper() is accessor


@pytest.mark.asyncio
async def test_session_off_leaves_session_unstarted(make_request):
    middleware = SessionMiddleware(config={"type": "array"}, lottery=NO_GC)
    request = make_request()

    await middleware.before_request(request)

    assert not request.ctx.session.manager.is_active


@pytest.mark.asyncio
async def test_data_survives_between_requests(array_config, make_request, make_response):
    middleware = SessionMiddleware(config=array_config, lottery=NO_GC)

    first = make_request()
    await middleware.before_request(first)
    first.ctx.session.set("user.id", 42)
    response = make_response()
    await middleware.after_response(first, response)

    response.add_cookie.assert_called_once()
    args, kwargs = response.add_cookie.call_args
    name, session_id = args
    assert name == "sid"
    assert kwargs["max_age"] == 900
    assert kwargs["secure"] is True
    assert kwargs["httponly"] is True

    second = make_request(cookies={"sid": session_id})
    await middleware.before_request(second)
    assert second.ctx.session.get("user.id") == 42
    assert session_helper("user.id") == 42
    assert session_helper("missing", "fallback") == "fallback"


@pytest.mark.asyncio
async def test_request_parameter_overrides_cookie(make_request):
    config = {"session_on": True, "type": "array", "var_session_id": "sid"}
    middleware = SessionMiddleware(config=config, lottery=NO_GC)
    request = make_request(cookies={"framework_session": "from-cookie"}, args={"sid": "from-query"})

    await middleware.before_request(request)

    assert request.ctx.session.session_id == "from-query"


@pytest.mark.asyncio
async def test_destroyed_session_forgets_cookie(array_config, make_request, make_response):
    middleware = SessionMiddleware(config=array_config, lottery=NO_GC)
    request = make_request()
    await middleware.before_request(request)
    await request.ctx.session.destroy()

    response = make_response()
    await middleware.after_response(request, response)

    response.delete_cookie.assert_called_once()
    response.add_cookie.assert_not_called()


@pytest.mark.asyncio
async def test_unstarted_session_sets_no_cookie(make_request, make_response):
    middleware = SessionMiddleware(config={"type": "array"}, lottery=NO_GC)
    request = make_request()
    await middleware.before_request(request)

    response = make_response()
    assert await middleware.after_response(request, response) is response

    response.add_cookie.assert_not_called()
    with pytest.raises(RuntimeError):
        session_helper()


@pytest.mark.asyncio
async def test_cookie_driver_serializes_bag(make_request, make_response):
    config = {"session_on": True, "type": "cookie", "secret": "k"}
    middleware = SessionMiddleware(config=config, lottery=NO_GC)
    request = make_request()
    await middleware.before_request(request)
    request.ctx.session.set("theme", "dark")

    response = make_response()
    await middleware.after_response(request, response)

    payload = response.add_cookie.call_args[0][1]
    store = request.ctx.session.manager.handler
    assert isinstance(store, CookieSessionStore)
    assert await store.read(payload) == {"theme": "dark"}


@pytest.mark.asyncio
async def test_lottery_win_runs_gc(array_config, make_request, make_response):
    middleware = SessionMiddleware(config=array_config, lottery=[1, 1])
    request = make_request()
    await middleware.before_request(request)

    manager = request.ctx.session.manager
    manager.gc = MagicMock(wraps=manager.gc)
    await middleware.after_response(request, make_response())

    manager.gc.assert_called_once()
    for task in list(middleware._gc_tasks):
        await task


@pytest.mark.asyncio
async def test_after_response_without_session_is_passthrough(make_request, make_response):
    middleware = SessionMiddleware(config={"type": "array"}, lottery=NO_GC)
    response = make_response()
    assert await middleware.after_response(make_request(), response) is response


def test_install_registers_hooks():
    app = MagicMock()
    middleware = SessionMiddleware.install(app)

    assert isinstance(middleware, SessionMiddleware)
    assert app.register_middleware.call_count == 2
    app.register_middleware.assert_any_call(middleware.before_request, "request")
    app.register_middleware.assert_any_call(middleware.after_response, "response")
    app.after_server_stop.assert_called_once_with(middleware.close)


def test_install_respects_enabled_flag():
    Config.set("session.enabled", False)
    app = MagicMock()

    assert SessionMiddleware.install(app) is None
    app.register_middleware.assert_not_called()


def test_middleware_shares_driver_between_requests():
    middleware = SessionMiddleware(config={"type": "array"})
    assert middleware.registry.create("array", {}) is middleware.registry.create("array", {})
    assert isinstance(middleware.registry.create("array", {}), ArraySessionStore)


@pytest.mark.asyncio
async def test_server_stop_disconnects_shared_redis_client():
    client = AsyncMock()
    registry = default_registry(shared=True)
    registry.register("redis", lambda config: RedisSessionStore(config, client=client))
    middleware = SessionMiddleware(config={"type": "redis"}, registry=registry)
    store = middleware.registry.create("redis", {})
    array_store = middleware.registry.create("array", {})

    await middleware.close(MagicMock(), None)

    client.aclose.assert_awaited_once()
    assert store.redis is None
    assert middleware.registry.create("array", {}) is not array_store
