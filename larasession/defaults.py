"""
Session Default Values
All hardcoded values should be defined here and accessed via Config.get()
These defaults can be overridden in config/session.py or at runtime
"""

# ============================================================================
# SESSION DEFAULTS
# ============================================================================

DEFAULT_SESSION_LIFETIME = 7200  # seconds (2 hours)
DEFAULT_SESSION_COOKIE_NAME = 'framework_session'
DEFAULT_SESSION_COOKIE_PATH = '/'
DEFAULT_SESSION_SAME_SITE = 'Lax'
DEFAULT_SESSION_ID_LENGTH = 40
DEFAULT_SESSION_LOTTERY = [2, 100]  # [chances, out_of] for garbage collection
DEFAULT_SESSION_PATH = 'storage/sessions'
DEFAULT_SESSION_LOCK_TIMEOUT = 30  # seconds a redis session lock survives a crashed worker
DEFAULT_SESSION_LOCK_WAIT = 10  # seconds to wait for another request to release the session

# Dotted keys address one level of nesting: 'user.id' -> bag['user']['id']
SESSION_KEY_SEPARATOR = '.'


# ============================================================================
# REDIS DEFAULTS
# ============================================================================

DEFAULT_REDIS_URL = 'redis://localhost:6379/0'
DEFAULT_REDIS_SESSION_PREFIX = 'session:'

# ============================================================================
# LOGGING DEFAULTS
# ============================================================================

DEFAULT_LOG_DIRECTORY = 'storage/logs'
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 5
