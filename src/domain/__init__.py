"""Domain layer: errors, constants and schemas."""

from .errors import (
    BuildLockTimeout,
    ErrorCodes,
    ForgeError,
    NotFound,
    ParseError,
    RenderError,
    SecurityViolation,
    TemplateLoadError,
    WriteError,
)
from .schemas import (
    BatchBuildRequest,
    BatchItemResult,
    BatchItemStatus,
    BuildRequest,
    BuildResult,
    DataSourceSpec,
    StorageType,
)

__all__ = [
    # errors
    "ForgeError",
    "ErrorCodes",
    "SecurityViolation",
    "NotFound",
    "ParseError",
    "TemplateLoadError",
    "RenderError",
    "WriteError",
    "BuildLockTimeout",
    # schemas
    "DataSourceSpec",
    "BuildRequest",
    "BatchBuildRequest",
    "BuildResult",
    "BatchItemResult",
    "BatchItemStatus",
    "StorageType",
]
