"""Custom exceptions for configuration loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when definition files are missing or invalid JSON."""


class DataValidationError(DataError):
    """Raised when configuration content fails structural validation."""


class DuplicateLootError(DataValidationError):
    """Raised when two loot sections declare the same id."""


class CyclicGroupError(DataValidationError):
    """Raised when a group section contains itself."""


class DataReferenceError(DataError):
    """Raised when definitions reference missing related data."""


class ConfigurationReferenceError(DataReferenceError):
    """Raised when a rule target is neither a known loot nor a valid combination."""
