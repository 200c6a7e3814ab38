class KanaDrillError(Exception):
    """Base exception for errors surfaced to the study UI."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class LoadError(KanaDrillError):
    """Raised when a dataset cannot be read, parsed or was never selected."""
    pass


class ValidationError(KanaDrillError):
    """Raised when a session cannot be started with the requested settings."""
    pass


class SessionStateError(KanaDrillError):
    """Raised when a session operation is called in the wrong state."""

    def __init__(self, state, message: str):
        self.state = state
        super().__init__(message)
