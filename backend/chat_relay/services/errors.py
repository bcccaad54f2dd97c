"""
Relay error taxonomy.

Pre-stream errors (InvalidInput, ConfigurationError, UpstreamStartFailure)
become a single JSON 500 response. UpstreamStreamFailure happens after the
event stream is open and becomes an in-stream error event.
"""


class RelayError(Exception):
    """Base class for every error the relay surfaces to the caller."""


class InvalidInput(RelayError):
    """The request body or its message list is malformed."""


class ConfigurationError(RelayError):
    """Required process configuration (the upstream credential) is missing."""


class UpstreamStartFailure(RelayError):
    """The completion call could not be initiated."""


class UpstreamStreamFailure(RelayError):
    """The completion stream failed after it had started."""
