class TriggerError(Exception):
    """Base error for the trigger pipeline."""


class ConfigurationMissingError(TriggerError):
    """Required configuration (e.g. the access code fingerprint) is absent or invalid."""


class AuthenticationError(TriggerError):
    """The supplied access code does not match the configured fingerprint."""


class AnalysisUnavailableError(TriggerError):
    """The content provider failed or produced an empty title/body."""
