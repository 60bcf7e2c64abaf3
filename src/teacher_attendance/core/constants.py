"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_HOURS = 24
DEFAULT_AUDIT_LIMIT = 100
DEFAULT_HISTORY_LIMIT = 200
MIN_PASSWORD_LENGTH = 6
QR_TOKEN_BYTES = 16
