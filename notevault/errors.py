# notevault/errors.py


class VaultError(Exception):
    """Base class for vault failures that are reported back to the caller."""


class AccessDenied(VaultError, PermissionError):
    """Path is hidden, outside every allowed root, or escapes through a symlink."""


class NotFound(VaultError, FileNotFoundError):
    """Neither the path nor its parent directory exists."""


class InvalidPattern(VaultError, ValueError):
    """Search query is not a usable pattern; search falls back to substring matching."""


class ConfigurationError(VaultError):
    """Startup configuration is unusable (missing or inaccessible vault root)."""
