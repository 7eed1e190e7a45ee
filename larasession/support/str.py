"""
String Helper Functions
Laravel-style string manipulation utilities
"""


class Str:
    """
    String manipulation helper class (Laravel-style)

    Used to turn short driver identifiers into conventional class names
    and to shorten session IDs for log output.
    """

    @staticmethod
    def studly(value: str) -> str:
        """
        Convert a string to StudlyCase (PascalCase)

        Args:
            value: String to convert

        Returns:
            Studly cased string

        Example:
            Str.studly('file')          # 'File'
            Str.studly('redis_cluster') # 'RedisCluster'
        """
        if not value:
            return value

        # Replace underscores and hyphens with spaces
        value = value.replace('_', ' ').replace('-', ' ')

        # Upper-case the first letter of each word, keep the rest as written
        return ''.join(word[0].upper() + word[1:] for word in value.split())

    @staticmethod
    def limit(value: str, limit: int = 100, end: str = '...') -> str:
        """
        Limit the number of characters in a string

        Example:
            Str.limit('abcdefgh', 4)  # 'abcd...'
        """
        if value is None or len(value) <= limit:
            return value
        return value[:limit] + end
