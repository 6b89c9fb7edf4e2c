"""
Custom Exceptions for RunLedger

Exception Hierarchy:
- RunLedgerException (base)
  - QueryValidationError (don't retry - fix the query)
  - DatabaseError
    - StoreUnavailableError (retry is up to the caller)

Querying a workflow outside the caller's accessible set is NOT an error:
it produces an empty result so that existence of other workflows is not
leaked.
"""

from typing import Optional


class RunLedgerException(Exception):
    """Base exception for all RunLedger errors"""

    def __init__(self, message: str, retry_allowed: bool = True):
        super().__init__(message)
        self.message = message
        self.retry_allowed = retry_allowed


# ============================================================================
# QUERY ERRORS
# ============================================================================

class QueryValidationError(RunLedgerException):
    """
    Query is malformed (bad date bound, bad cursor, both cursors given...).
    Raised before any store access. Should NOT be retried.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, retry_allowed=False)
        self.field = field


# ============================================================================
# DATABASE ERRORS
# ============================================================================

class DatabaseError(RunLedgerException):
    """
    Database connection or query error.
    """

    def __init__(self, message: str, retry_allowed: bool = True):
        super().__init__(message, retry_allowed=retry_allowed)


class StoreUnavailableError(DatabaseError):
    """
    The execution store could not be reached.
    Not retried here; retry policy belongs to the caller.
    """

    def __init__(self, message: str):
        super().__init__(message, retry_allowed=True)
