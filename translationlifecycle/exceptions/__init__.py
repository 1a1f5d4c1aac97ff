from .errors import (
    LifecycleError,
    InvalidTransition,
    AlreadyLocked,
    NotLockHolder,
    VersionNotFound,
    DocumentNotFound,
    StoreUnavailable,
    InvalidContent,
)

__all__ = [
    "LifecycleError",
    "InvalidTransition",
    "AlreadyLocked",
    "NotLockHolder",
    "VersionNotFound",
    "DocumentNotFound",
    "StoreUnavailable",
    "InvalidContent",
]
