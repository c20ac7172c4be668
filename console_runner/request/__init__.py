"""Request module - execution request and test filter construction."""

from .builder import (
    ExecutionRequest,
    PackageSettings,
    RequestKind,
    build_filter,
    build_request,
)
from .filter import TestFilter, category_matches

__all__ = [
    "ExecutionRequest",
    "PackageSettings",
    "RequestKind",
    "TestFilter",
    "build_filter",
    "build_request",
    "category_matches",
]
