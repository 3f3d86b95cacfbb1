"""Exceptions reported as UNKNOWN by the plugin."""


class CheckError(Exception):
    """Base class for errors that abort a check before a verdict exists."""

    pass


class UsageError(CheckError):
    """Invalid command-line usage."""

    pass


class ConfigError(CheckError):
    """Error loading or validating configuration."""

    pass


class ThresholdError(CheckError):
    """Threshold string that cannot be turned into a range."""

    pass
