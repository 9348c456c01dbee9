"""Exceptions raised for bad run configuration and malformed data files."""


class ConfigurationError(ValueError):
    """A required option is missing or has an invalid value."""


class DataFormatError(ValueError):
    """A vector or neighbor file cannot be read or has the wrong size."""
