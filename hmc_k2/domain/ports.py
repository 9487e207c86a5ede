"""Domain Ports - Errors, Results and the Parser Contract.

This module defines the exception hierarchy, the Result type used to report
per-entry outcomes of feed decoding, and the abstract contract that document
parsers implement.

Architecture:
    - Pure definitions with zero infrastructure dependencies
    - Adapters (the K2 parser) implement DocumentParserPort
    - Absence of optional data is never an error; only genuine mismatches
      (unknown types, malformed documents) raise
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

# Type variable for Result generic
T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    Feed decoding yields one Result per reported entry so that a single
    unrecognized entry does not abort the rest of the feed.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error message (only present if success=False)
        error_type: Type of error (UnknownTypeError, MalformedEntryError, etc.)
        error_details: Additional error context (entry_index, type_name, uuid)

    Example:
        ```python
        for result in parser.results():
            if result.is_success():
                print(result.value.uuid)
            else:
                logger.warning(result.error, extra=result.error_details)
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result.

        Parameters:
            value: The successful result value

        Returns:
            Result: Success result with the value
        """
        return cls(
            success=True,
            value=value,
            error=None,
            error_type=None,
            error_details=None
        )

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error (e.g., "UnknownTypeError")
            error_details: Additional context (entry_index, type_name, etc.)

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class K2ParserError(Exception):
    """Base exception for all K2 document parsing errors."""
    pass


class DocumentParseError(K2ParserError):
    """Raised when a response body cannot be turned into a document tree.

    This covers bodies that are not well-formed XML, bodies larger than the
    configured limit and bodies rejected by defusedxml (forbidden DTDs,
    entity declarations or external references).
    """
    pass


class UnknownTypeError(K2ParserError):
    """Raised when an entry's discriminant names no registered record type.

    An unrecognized type indicates a schema or version mismatch between the
    management console and this library, so it is surfaced to the caller
    rather than silently dropped.

    Attributes:
        type_name: The type name taken from the content discriminant
        uuid: Identifier of the offending entry, when known
    """

    def __init__(self, type_name: str, uuid: Optional[str] = None):
        message = f"Unknown K2 type: {type_name}"
        if uuid:
            message = f"{message} (entry {uuid})"
        super().__init__(message)
        self.type_name = type_name
        self.uuid = uuid


class MalformedEntryError(K2ParserError):
    """Raised when a record is built directly from a missing or empty envelope."""
    pass


class FieldNotFoundError(K2ParserError):
    """Raised when an in-place update targets a field that cannot be written.

    Attributes:
        field: The record field that was targeted
        path: The path expression of the field, when it is a schema field
    """

    def __init__(self, message: str, field: Optional[str] = None, path: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.path = path


class InvalidPathError(K2ParserError):
    """Raised when a path expression cannot be parsed.

    Attributes:
        path: The offending path expression
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


# ============================================================================
# Parser Port
# ============================================================================

class DocumentParserPort(ABC):
    """Abstract contract for K2 document parsers.

    A parser is built from one response body and exposes the records it
    contains. Both accessors are pure functions of the supplied body.

    Example Usage:
        ```python
        parser = K2Parser(response_text)
        system = parser.object("ManagedSystem")
        partitions = parser.objects("LogicalPartition")
        ```
    """

    @abstractmethod
    def object(self, expected_type=None):
        """Decode the single entry of the document.

        Parameters:
            expected_type: Type name (or record class) the entry must have

        Returns:
            The decoded record, or None if the document holds no decodable
            entry or the entry has another type.

        Raises:
            UnknownTypeError: If the entry type is not registered
        """
        pass

    @abstractmethod
    def objects(self, expected_type=None) -> list:
        """Decode every entry of a feed document, in document order.

        Parameters:
            expected_type: Only keep entries of this type name (or record class)

        Returns:
            list: Decoded records (possibly empty)
        """
        pass
