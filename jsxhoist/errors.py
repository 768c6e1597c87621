"""jsxhoist-specific exceptions."""


class JsxHoistAPIError(Exception):
    """Raised when an LLM API call fails or no API key is configured.

    Callers should print the message and exit non-zero; the relabeling stage
    never falls back silently on API errors.
    """


class ExtractionFailure(Exception):
    """Base class for failures of the component extraction stage."""


class ParseFailure(ExtractionFailure):
    """The input text is not valid TSX; the stage returns it untouched."""


class StructuralLookupFailure(ExtractionFailure):
    """An occurrence or its parent could not be located in the live tree.

    Recoverable: the rewriter records a diagnostic and moves on.
    """


class SerializationFailure(ExtractionFailure):
    """The rewritten tree could not be rendered to valid TSX."""
