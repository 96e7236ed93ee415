"""Domain layer: errors, schemas and constants."""

from .errors import (
    EmptyInputError,
    EmptyResultError,
    ErrorCodes,
    GenerationError,
    ImageGenError,
    ParseError,
    ProviderConfigError,
    RunInProgressError,
)
from .schemas import (
    DisplayEntry,
    Dish,
    EntryStatus,
    OverallStatus,
    PhotoStyle,
    RunLog,
    SessionState,
)

__all__ = [
    "ErrorCodes",
    "GenerationError",
    "EmptyInputError",
    "ParseError",
    "EmptyResultError",
    "ImageGenError",
    "RunInProgressError",
    "ProviderConfigError",
    "Dish",
    "DisplayEntry",
    "EntryStatus",
    "OverallStatus",
    "PhotoStyle",
    "RunLog",
    "SessionState",
]
