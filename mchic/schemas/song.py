"""
Mchic Setlist — Pydantic Request/Response Schemas
===================================================

What:  Pydantic models defining the API contract with the front-end.
Why:   Automatic serialization and OpenAPI doc generation.
How:   Route handlers declare these as response models. Song bodies are NOT
       parsed through these models on the way in: untrusted input goes
       through services.song_validation first, which produces a SongPayload.

Wire format:
    The front-end uses camelCase `keyOffset`; Python code uses `key_offset`.
    Both names are accepted when constructing models (populate_by_name) and
    responses are serialized by alias.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field

# int for whole semitones, float otherwise (2 stays 2, 1.5 stays 1.5)
KeyOffset = Union[int, float]


# ══════════════════════════════════════════════════════════════════════════
# Song Models
# ══════════════════════════════════════════════════════════════════════════


class SongPayload(BaseModel):
    """
    A canonical song without its id.

    Produced by the normalization pipeline; consumed by SongStore.insert()
    and SongStore.update(). Every instance already satisfies the allow-list
    and primary-instrument invariants.
    """
    author: str = Field(description="Author, trimmed, never empty")
    title: str = Field(description="Title, trimmed, never empty")
    voices: List[str] = Field(description="Assigned voices, de-duplicated")
    instruments: List[str] = Field(description="Assigned instruments, always includes 'chitarra'")
    key_offset: KeyOffset = Field(
        default=0,
        alias="keyOffset",
        description="Transposition in semitones",
    )

    model_config = {"populate_by_name": True}


class Song(BaseModel):
    """
    What:  Full representation of a stored song.
    Who:   Returned by every /api/songs endpoint and stored as-is in the
           JSON file backend.
    """
    id: str = Field(description="Server-assigned identifier (UUID4)")
    author: str
    title: str
    voices: List[str]
    instruments: List[str]
    key_offset: KeyOffset = Field(default=0, alias="keyOffset")

    model_config = {"populate_by_name": True, "from_attributes": True}

    @classmethod
    def from_payload(cls, song_id: str, payload: SongPayload) -> "Song":
        return cls(id=song_id, **payload.model_dump())

    def sort_key(self):
        """Case-insensitive author, then title (the listing order)."""
        return (self.author.lower(), self.title.lower())


# ══════════════════════════════════════════════════════════════════════════
# Auxiliary Responses
# ══════════════════════════════════════════════════════════════════════════


class LoginResponse(BaseModel):
    ok: bool = True


class ResetResponse(BaseModel):
    """Returned by POST /api/reset with the number of seeded songs."""
    ok: bool = True
    count: int = Field(description="Number of songs after the reset")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.
    Why:   The front-end reads `message` for display; `error` gives a
           machine-readable code, `request_id` links to server logs.

    Example:
        {
            "error": "not_found",
            "message": "Brano non trovato.",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Liveness probe response; no dependency is contacted."""
    status: str = Field(default="ok")
    version: str
    storage: str = Field(description="Active storage backend: file or sql")
    uptime_seconds: float
