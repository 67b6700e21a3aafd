"""Domain layer: origins, store layout and the error taxonomy."""

from .errors import (
    AmbiguousTemplateError,
    FetchFailedError,
    InvalidOriginError,
    ListFailedError,
    RenderError,
    TemplError,
    TemplateNotFoundError,
    UpdateFailedError,
    VariablesFileNotFoundError,
    VariablesFormatError,
)
from .origin import Origin, OriginKind, resolve_destination

__all__ = [
    "AmbiguousTemplateError",
    "FetchFailedError",
    "InvalidOriginError",
    "ListFailedError",
    "Origin",
    "OriginKind",
    "RenderError",
    "TemplError",
    "TemplateNotFoundError",
    "UpdateFailedError",
    "VariablesFileNotFoundError",
    "VariablesFormatError",
    "resolve_destination",
]
