"""Exceptions raised by the quiz generation pipeline."""


class QuizError(Exception):
    """Base exception for quizsmith errors.

    The message is meant to be shown to the user as-is.
    """

    pass


class EmptyInputError(QuizError):
    """Raised when the model response contained no text at all."""

    pass


class ParseError(QuizError):
    """Base exception for JSON recovery failures."""

    pass


class ParseMalformedError(ParseError):
    """Raised when the model output could not be turned into valid JSON."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.detail = detail


class ParseTruncatedError(ParseError):
    """Raised when the model output looks cut off before the JSON closed.

    Usually means the output token budget was too small for the request.
    """

    pass


class PlanEmptyError(QuizError):
    """Raised when no question type can be requested."""

    pass


class SchemaMismatchError(QuizError):
    """Raised when a generated question does not fit a supported schema."""

    pass


class NoNewQuestionsError(QuizError):
    """Raised when collecting more questions produced nothing new."""

    pass


class SourceTextError(QuizError):
    """Raised when the source text for a quiz is missing or empty."""

    pass


class QuizStateError(QuizError):
    """Raised when an operation does not fit the current quiz state."""

    pass


class VaultStoreError(QuizError):
    """Raised when stored vault data cannot be read."""

    pass


class SettingsError(QuizError):
    """Raised when a settings change is unknown or invalid."""

    pass
