"""
hnote Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the note API.
How:   Each exception carries a client-safe message, a short machine-readable
       `code` (returned as `err` in error bodies) and an optional context dict
       that is logged but never returned to the client.
Who:   Raised by NoteStore, NoteService and the server entry point; caught by
       the global handlers registered in main.py.

Exception Hierarchy:
    HNoteError (base)
    ├── DecodeError      → 422 Unprocessable Entity (malformed request body)
    ├── NotFoundError    → 404 Not Found
    ├── StoreError       → 400 Bad Request (persistence failure, generic message)
    └── StartupError     → process exit status 1 (never reaches a request)
"""

from typing import Any, Dict, Optional


class HNoteError(Exception):
    """
    Base exception for all hnote application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    code = "internal_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DecodeError(HNoteError):
    """
    Raised when a request body cannot be decoded into a note payload.

    When:    Invalid JSON, a non-object JSON document, or fields of the wrong type.
    HTTP:    422 Unprocessable Entity. The request is rejected before any store call.
    """

    code = "decode_error"

    def __init__(
        self,
        message: str = "error decoding json",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(HNoteError):
    """
    Raised when a requested note does not exist.

    When:    GET/PUT/DELETE /note/{id} with an unknown id, an already-deleted id,
             or a string that is not a valid identifier at all.
    HTTP:    404 Not Found
    """

    code = "not_found"

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class StoreError(HNoteError):
    """
    Raised when the note store cannot complete an operation.

    When:    Connection refused or lost, write rejected, constraint violation.
    HTTP:    400 Bad Request with a short operation-specific message
             ("notes fetch failed", "failed to create note", ...).

    The underlying driver error is kept in `context` for the server log only.
    """

    code = "store_error"

    def __init__(
        self,
        message: str = "note store operation failed",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation


class StartupError(HNoteError):
    """
    Raised when the process cannot start serving.

    When:    TLS certificate/key unreadable, store unreachable at startup.
    Effect:  The entry point logs it and exits with status 1; no retry.
    """

    code = "startup_error"
