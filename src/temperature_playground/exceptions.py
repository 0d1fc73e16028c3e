"""Exception hierarchy for temperature-playground.

All exceptions derive from PlaygroundError, enabling broad catch patterns
at the application boundary while allowing fine-grained handling internally.
"""


class PlaygroundError(Exception):
    """Base exception for all temperature-playground errors."""


class ConfigValidationError(PlaygroundError):
    """Configuration field validation failed.

    Raised when per-request extra_args contain unknown keys, attempt to
    override infrastructure fields, or fail type validation.
    """


class DecodeError(PlaygroundError):
    """A decode session terminated with a failure.

    Wraps the exception raised by the Model, the Tokenizer, the draw source
    or the token consumer. The original exception is available as
    ``__cause__``; ``step`` is the zero-based step that failed.
    """

    def __init__(self, message: str, step: int) -> None:
        super().__init__(message)
        self.step = step


class SessionStateError(PlaygroundError):
    """A decode session was driven from a state that does not allow it.

    Sessions run at most once. Requesting more tokens from the same point
    requires a new session.
    """
