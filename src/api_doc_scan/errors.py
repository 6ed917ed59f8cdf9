"""Error types raised while turning annotation blocks into a document."""


class ApiDocScanError(Exception):
    """Base class for all errors raised by api-doc-scan."""


class SectionError(ApiDocScanError):
    """A structured section (Parameters, Responses, Extensions) has a malformed line."""

    def __init__(self, section: str, line: str, message: str):
        self.section = section
        self.line = line
        self.message = message
        super().__init__(f"{section}: {message} (line: {line.strip()!r})")


class BuildError(ApiDocScanError):
    """A route could not be built; carries the operation id for context."""

    def __init__(self, operation_id: str, cause: Exception):
        self.operation_id = operation_id
        self.cause = cause
        super().__init__(f"operation ({operation_id}): {cause}")


class FeedError(ApiDocScanError):
    """A route feed or base document could not be loaded."""
