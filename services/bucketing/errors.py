from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a request names an unknown frequency, repartition or data type."""


class InvalidFrequency(ConfigurationError):
    pass


class InvalidRepartitionType(ConfigurationError):
    pass


class InvalidDataType(ConfigurationError):
    pass
