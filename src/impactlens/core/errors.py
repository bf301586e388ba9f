"""Error taxonomy for diagnostic generation."""


class DiagnosticError(Exception):
    """Base class for every failure surfaced to the user as a single message."""


class InputValidationError(DiagnosticError):
    """Inputs were rejected locally, before any outbound call."""


class GenerationInProgressError(DiagnosticError):
    """A second generation was requested while one is outstanding."""


class TransportError(DiagnosticError):
    """The outbound call to the model failed (network, auth, quota, SDK)."""


class EmptyResponseError(DiagnosticError):
    """The model call succeeded but returned no text."""


class MalformedResponseError(DiagnosticError):
    """The model returned text that is not a JSON object."""


class SchemaMismatchError(MalformedResponseError):
    """The model returned JSON that does not match the report schema."""
