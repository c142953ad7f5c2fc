"""
Mchic Setlist — Custom Exception Hierarchy
============================================

What:  Defines application-specific exceptions for the four failure classes
       the API distinguishes.
Why:   Services raise domain errors without knowing about HTTP; global
       handlers registered in main.py translate them into status codes and
       a consistent JSON body.
How:   Each exception carries a user-facing message and an optional context
       dict. Context is logged server-side and never returned for 5xx errors.

Exception Hierarchy:
    MchicError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized
    ├── NotFoundError            → 404 Not Found
    ├── FileStorageError         → 500 Internal Server Error (generic message)
    └── DatabaseError            → 500 Internal Server Error (generic message)

User-facing messages are Italian, matching the front-end.
"""

from typing import Any, Dict, Optional

INTERNAL_ERROR_MESSAGE = "Errore interno al server."
UNAUTHORIZED_MESSAGE = "Accesso non autorizzato."
SONG_NOT_FOUND_MESSAGE = "Brano non trovato."


class MchicError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = INTERNAL_ERROR_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MchicError):
    """
    Raised when a request body fails normalization.

    What:    The client sent a song that cannot be stored as-is.
    When:    Missing title or author, no valid voice.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "L'autore è obbligatorio.",
            "details": {"field": "author"}
        }
    """

    def __init__(
        self,
        message: str = "Richiesta non valida.",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(MchicError):
    """
    Raised when the shared credential pair is missing or wrong.

    HTTP:    401 Unauthorized

    `challenge` controls the WWW-Authenticate header: gated routes send it
    so HTTP clients know Basic auth is expected; the login form endpoint
    does not, so browsers never pop up their native credential dialog.
    """

    def __init__(
        self,
        message: str = UNAUTHORIZED_MESSAGE,
        challenge: bool = True,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.challenge = challenge


class NotFoundError(MchicError):
    """
    Raised when a song id does not exist.

    Stores return None / False for a missing id; the route layer converts
    that into this exception so the global handler can answer 404.
    """

    def __init__(
        self,
        message: str = SONG_NOT_FOUND_MESSAGE,
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class FileStorageError(MchicError):
    """
    Raised when the JSON data file cannot be read, parsed, or written.

    When:    Permission denied, disk full, corrupt JSON, invalid records.
    HTTP:    500 Internal Server Error

    The file path and OS error go into `context` for the logs only.
    """

    def __init__(
        self,
        message: str = INTERNAL_ERROR_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(MchicError):
    """
    Raised when a database statement fails unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. SQL text,
        constraint names and driver errors are logged server-side only.
    """

    def __init__(
        self,
        message: str = INTERNAL_ERROR_MESSAGE,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
