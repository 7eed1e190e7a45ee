"""
Class Loader
Dynamic class loading utility for importing classes from dotted paths
"""
import importlib
from typing import Type


class ClassLoader:
    """
    Utility for dynamically loading classes from string paths

    Example:
        cls = ClassLoader.load('myapp.sessions.DatabaseSessionStore')
        store = cls(config)
    """

    @staticmethod
    def load(class_path: str) -> Type:
        """
        Load a class from a dotted path string

        Args:
            class_path: Full dotted path to class

        Returns:
            The class object (not instantiated)

        Raises:
            ImportError: If module cannot be imported
            AttributeError: If class doesn't exist in module
            ValueError: If the path has no module part
        """
        module_path, _, class_name = class_path.rpartition('.')
        if not module_path or not class_name:
            raise ValueError(f"Not a dotted class path: {class_path!r}")

        module = importlib.import_module(module_path)
        return getattr(module, class_name)
