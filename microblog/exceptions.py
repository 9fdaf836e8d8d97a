"""
Microblog Backend: Custom Exception Hierarchy
=============================================

What:  Defines application-specific exceptions for each error scenario.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by repositories, services and routes; caught by global handlers.

Exception Hierarchy:
    MicroblogError (base)
    ├── PersistenceError            → 500 (only if it escapes the service layer)
    │   └── DuplicateKeyError       → unique constraint violated on write
    ├── ServiceError                → 400 (service fault, wraps PersistenceError)
    │   ├── ValidationError         → 400 bad input shape/content
    │   ├── ConflictError           → 400 username already taken
    │   ├── AuthorizationError      → 400 author does not own the message
    │   ├── NotFoundError           → 400 referenced entity absent
    │   └── InvalidArgumentError    → 400 structurally invalid identifier
    └── AuthenticationError         → 401 login credentials did not match

Propagation:
    Repositories wrap every driver error in PersistenceError (the driver
    error stays attached as __cause__). Services wrap persistence faults in
    ServiceError or translate them into a domain kind. Domain errors reach
    the routes unwrapped.
"""

from typing import Any, Dict, Optional


class MicroblogError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only for 4xx errors)
        code:     Machine-readable error code used in the JSON error body
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


# ══════════════════════════════════════════════════════════════════════════
# Persistence Layer
# ══════════════════════════════════════════════════════════════════════════


class PersistenceError(MicroblogError):
    """
    Raised when a database statement fails.

    What:    Wraps any SQLAlchemy/driver error raised by a repository.
    When:    Connection lost, constraint violation, no id returned on insert.
    HTTP:    500 Internal Server Error (services normally wrap it first)

    The message names the failing operation ("Error while inserting a
    message"); the SQL text and driver message are kept in context for the
    server log only.
    """

    code = "server_error"

    def __init__(
        self,
        message: str = "A database error occurred",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(message=message, context=ctx)
        self.operation = operation


class DuplicateKeyError(PersistenceError):
    """Raised when an insert/update violates a unique constraint."""


# ══════════════════════════════════════════════════════════════════════════
# Domain Service Layer
# ══════════════════════════════════════════════════════════════════════════


class ServiceError(MicroblogError):
    """
    Base for every fault surfaced by the service layer.

    Raised directly when a pass-through operation hits a PersistenceError;
    subclasses describe rule violations.
    HTTP: 400 Bad Request
    """

    code = "service_error"

    def __init__(
        self,
        message: str = "The request could not be processed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(ServiceError):
    """
    Raised when client input fails a business rule.

    When:  Blank username, short password, blank or over-long message text,
           unresolved message author.
    HTTP:  400 Bad Request
    """

    code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class ConflictError(ServiceError):
    """Raised when a username is already registered."""

    code = "conflict"

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(ServiceError):
    """
    Raised when the resolved author does not own the message being written.

    HTTP: 400 Bad Request (the HTTP contract reports all write-rule
    failures the same way)
    """

    code = "authorization_error"

    def __init__(
        self,
        message: str = "Account is not allowed to perform this operation",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ServiceError):
    """
    Raised when a write operation references an entity that does not exist.

    Reads never raise this: a lookup miss is a valid outcome and is
    returned as None.
    """

    code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InvalidArgumentError(ServiceError):
    """Raised when the caller passes a structurally invalid identifier (e.g. 0)."""

    code = "invalid_argument"

    def __init__(
        self,
        message: str = "Invalid argument",
        argument: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if argument:
            ctx["argument"] = argument
        super().__init__(message=message, context=ctx)
        self.argument = argument


# ══════════════════════════════════════════════════════════════════════════
# Request Handling Layer
# ══════════════════════════════════════════════════════════════════════════


class AuthenticationError(MicroblogError):
    """
    Raised by the login route when credentials do not match.

    The message is identical for unknown usernames and wrong passwords.
    HTTP: 401 Unauthorized
    """

    code = "unauthorized"

    def __init__(
        self,
        message: str = "Invalid username or password",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
