class ConfigurationError(Exception):
    """Raised when the process cannot start with the given configuration."""
