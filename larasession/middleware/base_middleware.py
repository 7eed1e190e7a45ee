"""
Base Middleware Class
Abstract base class for all middlewares
"""
from abc import ABC, abstractmethod
from sanic import Request, Sanic
from typing import Optional, Dict, Any


class Middleware(ABC):
    """
    Base middleware class

    Middlewares can:
    - Inspect/modify requests before they reach routes
    - Inspect/modify responses before they're sent

    Configuration:
    Subclasses can set these class variables for automatic configuration:
    - ENABLED_CONFIG_KEY: Config key to check if middleware is enabled
    - CONFIG_MAPPING: Dict mapping constructor params to (config key, default)
    - DEFAULT_ENABLED: Default enabled state if config key not found
    """

    ENABLED_CONFIG_KEY: str = None
    CONFIG_MAPPING: Dict[str, tuple] = {}
    DEFAULT_ENABLED: bool = True

    @classmethod
    def _is_enabled(cls) -> bool:
        """
        Hook for custom enabled check logic

        Returns:
            True if middleware should be enabled
        """
        from larasession.support import Config

        if cls.ENABLED_CONFIG_KEY:
            return bool(Config.get(cls.ENABLED_CONFIG_KEY, cls.DEFAULT_ENABLED))

        return cls.DEFAULT_ENABLED

    @classmethod
    def _register_middleware(cls) -> Optional['Middleware']:
        """
        Factory method to create middleware instance from configuration

        Returns:
            Middleware instance if enabled, None otherwise
        """
        from larasession.support import Config

        if not cls._is_enabled():
            return None

        config_params: Dict[str, Any] = {}
        for param_name, (config_key, default_value) in cls.CONFIG_MAPPING.items():
            config_params[param_name] = Config.get(config_key, default_value)

        return cls(**config_params)

    @classmethod
    def install(cls, app: Sanic) -> Optional['Middleware']:
        """
        Create the middleware from config and attach it to a Sanic app

        Returns:
            The installed middleware, or None when disabled
        """
        middleware = cls._register_middleware()
        if middleware is None:
            return None

        app.register_middleware(middleware.before_request, 'request')
        app.register_middleware(middleware.after_response, 'response')
        app.after_server_stop(middleware.close)
        return middleware

    @abstractmethod
    async def before_request(self, request: Request):
        """
        Called before the request reaches the route handler

        Args:
            request: The Sanic request object

        Returns:
            None: Continue to next middleware/route
            HTTPResponse: Short-circuit and return response immediately
        """
        pass

    async def after_response(self, request: Request, response):
        """
        Called after the route handler, before sending response

        Args:
            request: The Sanic request object
            response: The response object

        Returns:
            response: Modified or original response
        """
        return response

    async def close(self, app: Sanic, loop):
        """Called after the server stops; release long-lived resources"""
        pass
