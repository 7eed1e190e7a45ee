"""
Framework Support Classes
"""

from larasession.support.config import Config
from larasession.support.crypto import Crypto
from larasession.support.class_loader import ClassLoader
from larasession.support.str import Str

__all__ = [
    'Config',
    'Crypto',
    'ClassLoader',
    'Str',
]
