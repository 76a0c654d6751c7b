"""Core domain types: results, typed failures, manifest, lockfile, project layout."""

from .errors import ErrorCode, FrateError
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # errors
    "ErrorCode",
    "FrateError",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
