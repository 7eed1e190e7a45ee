"""
Session Middleware
Starts and saves sessions automatically
"""
import asyncio
import random
from typing import Any, Dict, Mapping, Optional
from sanic import Request
from larasession.helpers import set_current_session
from larasession.logging import getLogger
from larasession.middleware.base_middleware import Middleware
from larasession.session import Session, SessionManager, CookieSessionStore
from larasession.session.driver_registry import SessionDriverRegistry, default_registry
from larasession.support import Config

logger = getLogger(__name__)


class SessionMiddleware(Middleware):
    """Session management middleware"""

    @staticmethod
    def _get_config_defaults():
        from larasession.defaults import DEFAULT_SESSION_LOTTERY
        return {
            'lottery': ('session.LOTTERY', DEFAULT_SESSION_LOTTERY),
        }

    ENABLED_CONFIG_KEY = 'session.ENABLED'
    CONFIG_MAPPING = _get_config_defaults.__func__()
    DEFAULT_ENABLED = True

    def __init__(self, config: Optional[Mapping[str, Any]] = None,
                 registry: Optional[SessionDriverRegistry] = None, lottery=None):
        """
        Initialize session middleware

        Args:
            config: Session options (read from Config 'session' per request if omitted)
            registry: Driver registry; stores are shared across requests
            lottery: [chances, out_of] for running garbage collection
        """
        from larasession.defaults import DEFAULT_SESSION_LOTTERY
        self.config = dict(config) if config is not None else None
        self.registry = registry or default_registry(shared=True)
        self.lottery = lottery or DEFAULT_SESSION_LOTTERY
        self._gc_tasks = set()

    def _session_config(self) -> Dict[str, Any]:
        if self.config is not None:
            return dict(self.config)
        return Config.section('session')

    def _create_manager(self, request: Request, config: Dict[str, Any]) -> SessionManager:
        """Manager bound to the configured driver and the incoming cookie"""
        driver = config.get('type') or 'file'
        manager = SessionManager(
            handler=self.registry.create(driver, config),
            name=config.get('name'),
        )

        cookie_value = request.cookies.get(manager.name)
        if cookie_value:
            manager.set_id(cookie_value)

        return manager

    async def before_request(self, request: Request):
        """Build the accessor and start the session if configured to"""
        config = self._session_config()
        manager = self._create_manager(request, config)

        session = Session(
            manager,
            config=config,
            request_params=request.args,
            registry=self.registry,
        )

        if session.auto_start:
            await session.start()

        request.ctx.session = session
        set_current_session(session)

        return None

    async def after_response(self, request: Request, response):
        """Flush the session and write the session cookie"""
        session: Optional[Session] = getattr(request.ctx, 'session', None)
        if session is None:
            return response

        manager = session.manager

        try:
            if manager.is_active:
                await session.pause()

            if manager.destroyed:
                self._forget_session_cookie(response, manager)
            elif manager.started:
                self._set_session_cookie(response, manager)

            self._maybe_run_gc(manager)
        finally:
            set_current_session(None)

        return response

    def _set_session_cookie(self, response, manager: SessionManager):
        """Set session cookie on response"""
        params = manager.cookie_params

        # For cookie driver, serialize data
        if isinstance(manager.handler, CookieSessionStore):
            cookie_value = manager.handler.serialize(manager.bag)
        else:
            cookie_value = manager.get_id()

        response.add_cookie(
            manager.name,
            cookie_value,
            path=params['path'],
            domain=params['domain'],
            secure=params['secure'],
            httponly=params['httponly'],
            samesite=params['samesite'],
            max_age=params['lifetime'] or None,
        )

    def _forget_session_cookie(self, response, manager: SessionManager):
        """Expire the session cookie after destroy()"""
        params = manager.cookie_params
        response.delete_cookie(
            manager.name,
            path=params['path'],
            domain=params['domain'],
        )

    def _maybe_run_gc(self, manager: SessionManager):
        """Maybe run garbage collection based on lottery"""
        chances, out_of = self.lottery
        if chances <= 0 or random.randint(1, out_of) > chances:
            return

        logger.debug("Session GC lottery won, collecting expired sessions")

        # Run GC in background (non-blocking)
        task = asyncio.create_task(manager.gc())
        self._gc_tasks.add(task)
        task.add_done_callback(self._gc_tasks.discard)

    async def close(self, app, loop):
        """Close shared driver connections on server stop"""
        await self.registry.close()
