"""
Crypto - Token generation and signed data helpers
"""
import secrets
from itsdangerous import URLSafeTimedSerializer


class Crypto:
    """Centralized cryptography helper"""

    # === Random Token Generation ===

    @staticmethod
    def generate_token(length: int = 32) -> str:
        """
        Generate URL-safe random token

        Args:
            length: Length of token in bytes (default: 32)

        Returns:
            URL-safe random string
        """
        return secrets.token_urlsafe(length)

    # === Signed Data (itsdangerous) ===

    @staticmethod
    def create_serializer(secret_key: str, salt: str = 'session') -> URLSafeTimedSerializer:
        """
        Create URL-safe timed serializer

        Args:
            secret_key: Secret key for signing
            salt: Namespace for the signature

        Returns:
            URLSafeTimedSerializer instance
        """
        return URLSafeTimedSerializer(secret_key, salt=salt)
