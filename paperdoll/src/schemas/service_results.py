"""
Structured result types for catalog scans and palette remapping.

Operations that report an outcome to a collaborator (scan counts, "no remap
available") return one of these instead of raising.
"""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar('T')


@dataclass
class ServiceResult(Generic[T]):
    """
    Generic result with structured error information.

    Lookup misses and malformed input are reported through `success=False`
    rather than exceptions.
    """
    success: bool
    data: Optional[T] = None
    message: str = ""
    error_code: Optional[str] = None

    @classmethod
    def success_with_data(cls, data: T, message: str = "Operation successful") -> 'ServiceResult[T]':
        """Create successful result with data."""
        return cls(success=True, data=data, message=message)

    @classmethod
    def success_no_data(cls, message: str = "Operation successful") -> 'ServiceResult[None]':
        """Create successful result without data."""
        return cls(success=True, data=None, message=message)

    @classmethod
    def failure(cls, message: str, error_code: Optional[str] = None) -> 'ServiceResult[T]':
        """Create failure result with error information."""
        return cls(success=False, data=None, message=message, error_code=error_code)


@dataclass
class ScanResult(Generic[T]):
    """
    Result of a filesystem catalog scan.

    A scan never fails as a whole: files that could not be parsed are listed
    in `errors` and the catalog holds everything that was well-formed.
    """
    catalog: T
    errors: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        """Number of files excluded because of parse errors."""
        return len(self.errors)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class ErrorCodes:
    """Error codes used in ServiceResult.error_code."""
    INVALID_FILENAME = "INVALID_FILENAME"
    UNKNOWN_PART = "UNKNOWN_PART"
    REMAP_UNAVAILABLE = "REMAP_UNAVAILABLE"
    CATALOG_NOT_LOADED = "CATALOG_NOT_LOADED"
