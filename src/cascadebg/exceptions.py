"""Exceptions raised by the cascade package."""


class CascadeError(Exception):
    """Base class for errors raised by the cascade package."""


class ConfigError(CascadeError, ValueError):
    """An option or constructor argument is outside of its allowed range."""
