"""Exception types raised across the drafting workflow."""


class ComplaintError(Exception):
    """Base class for all drafting tool errors."""


class InputValidationError(ComplaintError):
    """Request blocked client-side before any network call (e.g. empty prompt and no files)."""


class DraftServiceError(ComplaintError):
    """Create, regenerate or chat failed. ``user_message`` is safe to show in the UI."""

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or message


class LLMError(RuntimeError):
    """The upstream model could not be reached or returned an unusable response."""


class ExtractionError(ComplaintError):
    """A single attached file could not be read."""


class ExportError(ComplaintError):
    """PDF/DOCX export failed; no partial output was produced."""


class EditorStateError(ComplaintError):
    """Section editor operation not allowed in its current state."""


class AssistantBusyError(ComplaintError):
    """A chat turn is already in flight."""
