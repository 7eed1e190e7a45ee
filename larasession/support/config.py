"""
Config Manager - Laravel-style configuration access
Access config files using dot notation
"""

import importlib
import threading
from types import ModuleType
from typing import Any, Dict, Optional


class Config:
    """
    Configuration manager with dot notation access

    Usage:
        # Get config value
        driver = Config.get('session.type')

        # With default
        lifetime = Config.get('session.expire', 7200)

        # Set runtime value
        Config.set('session.prefix', 'app')

        # Whole session section as a plain dict with lowercase keys
        options = Config.section('session')

    Config files should be in config/ directory:
        config/
        ├── app.py
        └── session.py
    """

    _lock = threading.Lock()
    _loaded: Dict[str, Any] = {}
    _runtime_overrides: Dict[str, Any] = {}

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation (case-insensitive)

        Args:
            key: Config key in dot notation (e.g., 'session.type')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            Config.get('session.name', 'framework_session')
            Config.get('SESSION.NAME', 'framework_session')  # Same result
        """
        key_lower = key.lower()

        if key_lower in cls._runtime_overrides:
            return cls._runtime_overrides[key_lower]

        parts = key_lower.split('.')
        file_name = parts[0]

        if file_name in cls._runtime_overrides:
            value = cls._runtime_overrides[file_name]
        else:
            value = cls.all(file_name)

        if value is None:
            return default

        for part in parts[1:]:
            value = cls._lookup(value, part)
            if value is None:
                return default

        return value

    @staticmethod
    def _lookup(container: Any, part: str) -> Any:
        """Case-insensitive attribute or dict key lookup"""
        if isinstance(container, dict):
            for dict_key in container.keys():
                if str(dict_key).lower() == part:
                    return container[dict_key]
            return None

        if hasattr(container, '__dict__'):
            for attr_name in dir(container):
                if attr_name.lower() == part:
                    return getattr(container, attr_name)

        return None

    @classmethod
    def section(cls, name: str) -> Dict[str, Any]:
        """
        Get a whole config file as a dict with lowercase keys

        Runtime overrides win over file values. Both a full section
        override (Config.set('session', {...})) and single key overrides
        (Config.set('session.prefix', 'app')) are honoured.

        Args:
            name: Config file name (e.g., 'session')

        Returns:
            Flat dict of the section's public values
        """
        name = name.lower()
        values: Dict[str, Any] = {}

        module = cls.all(name)
        if isinstance(module, dict):
            values.update({str(k).lower(): v for k, v in module.items()})
        elif module is not None:
            for attr_name in dir(module):
                if attr_name.startswith('_'):
                    continue
                attr = getattr(module, attr_name)
                if callable(attr) or isinstance(attr, ModuleType):
                    continue
                values[attr_name.lower()] = attr

        override = cls._runtime_overrides.get(name)
        if isinstance(override, dict):
            values.update({str(k).lower(): v for k, v in override.items()})

        prefix = f'{name}.'
        for key, value in cls._runtime_overrides.items():
            if key.startswith(prefix) and '.' not in key[len(prefix):]:
                values[key[len(prefix):]] = value

        return values

    @classmethod
    def _load_config_file(cls, file_name: str):
        """
        Load a config file from config/ directory

        Args:
            file_name: Config file name (without .py extension)
        """
        with cls._lock:
            if file_name in cls._loaded:
                return

            try:
                module = importlib.import_module(f'config.{file_name}')
                cls._loaded[file_name] = module
            except ImportError:
                # Config file doesn't exist
                cls._loaded[file_name] = None

    @classmethod
    def set(cls, key: str, value: Any):
        """
        Set configuration value at runtime (does not persist to file)

        Args:
            key: Config key in dot notation (case-insensitive)
            value: Value to set

        Example:
            Config.set('session.type', 'redis')
            Config.set('session', {'session_on': True, 'prefix': 'app'})
        """
        cls._runtime_overrides[key.lower()] = value

    @classmethod
    def has(cls, key: str) -> bool:
        """Check if configuration key exists"""
        return cls.get(key) is not None

    @classmethod
    def all(cls, file_name: str) -> Optional[Any]:
        """
        Get all configuration from a file

        Args:
            file_name: Config file name

        Returns:
            Config module or None
        """
        if file_name not in cls._loaded:
            cls._load_config_file(file_name)

        return cls._loaded.get(file_name)

    @classmethod
    def reload(cls, file_name: Optional[str] = None):
        """
        Reload configuration file(s)

        Args:
            file_name: Specific file to reload, or None to reload all
        """
        with cls._lock:
            if file_name:
                cls._loaded.pop(file_name, None)
            else:
                cls._loaded.clear()

    @classmethod
    def clear_runtime_overrides(cls):
        """Clear all runtime configuration overrides"""
        cls._runtime_overrides.clear()
