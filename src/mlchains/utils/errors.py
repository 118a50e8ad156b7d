"""Exceptions raised by mlchains."""


class MLChainsError(Exception):
    """Base class for every error raised by the library."""


class ValidationError(MLChainsError, ValueError):
    """Invalid configuration, detected before any training or prediction starts."""


class SchemaMismatch(MLChainsError, ValueError):
    """New data does not provide the attribute columns a model was trained on."""


class TrainingFailure(MLChainsError, RuntimeError):
    """A task dispatched by the executor raised; the whole call is aborted."""

    def __init__(self, message: str, task_index: int | None = None):
        super().__init__(message)
        self.task_index = task_index
