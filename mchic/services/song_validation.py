"""
Mchic Setlist — Song Normalization Pipeline
=============================================

What:  Turns an untrusted request body into a canonical SongPayload.
Why:   POST /api/songs and PUT /api/songs/{id} share the same rules; keeping
       them in one pure module makes them testable without HTTP or storage.
How:   A fixed sequence of steps, short-circuiting on the first rejection:

           title → author → voices → instruments → keyOffset

       A rejection is raised as ValidationError carrying one human-readable
       reason. Nothing else escapes: bodies that are not JSON objects are
       treated as empty, non-string fields as missing.

Allow-lists:
    Unknown voices and instruments are dropped silently. Only an empty
    voice list rejects the payload. Instruments never reject: the primary
    instrument is prepended when missing, so the front-end can leave the
    instrument selector empty.

    Voices are de-duplicated; instruments keep duplicates (two guitars is
    a valid arrangement).
"""

import math
import re
from typing import Any, List, Mapping, Optional, Union

from mchic.exceptions import ValidationError
from mchic.schemas.song import SongPayload

ALLOWED_VOICES = ("lucio", "cristiano")
ALLOWED_INSTRUMENTS = ("chitarra", "basso")
PRIMARY_INSTRUMENT = "chitarra"

TITLE_REQUIRED = "Il titolo è obbligatorio."
AUTHOR_REQUIRED = "L'autore è obbligatorio."
VOICE_REQUIRED = f"Seleziona almeno una voce valida ({', '.join(ALLOWED_VOICES)})."

_DECIMAL_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_PREFIXED_INTEGER = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def normalize_song_payload(body: Any) -> SongPayload:
    """
    Validate and normalize a song body.

    Args:
        body: Decoded JSON of any shape (dict, list, None, scalar).

    Returns:
        SongPayload satisfying every song invariant.

    Raises:
        ValidationError: With the reason for the first failed step.
    """
    fields: Mapping[str, Any] = body if isinstance(body, Mapping) else {}

    title = _clean_text(fields.get("title"))
    if not title:
        raise ValidationError(message=TITLE_REQUIRED, field="title")

    author = _clean_text(fields.get("author"))
    if not author:
        raise ValidationError(message=AUTHOR_REQUIRED, field="author")

    voices = sanitize_voices(fields.get("voices"))
    if not voices:
        raise ValidationError(
            message=VOICE_REQUIRED,
            field="voices",
            context={"allowed": list(ALLOWED_VOICES)},
        )

    return SongPayload(
        author=author,
        title=title,
        voices=voices,
        instruments=sanitize_instruments(fields.get("instruments")),
        key_offset=normalize_key_offset(fields.get("keyOffset")),
    )


def sanitize_voices(value: Any) -> List[str]:
    """Allow-listed voices in input order, without duplicates."""
    voices: List[str] = []
    for item in _split_items(value):
        clean = _normalize_token(item)
        if clean in ALLOWED_VOICES and clean not in voices:
            voices.append(clean)
    return voices


def sanitize_instruments(value: Any) -> List[str]:
    """
    Allow-listed instruments in input order, duplicates kept.

    The primary instrument is prepended when the filtered list lacks it,
    so the result is never empty.
    """
    instruments = [
        clean
        for clean in (_normalize_token(item) for item in _split_items(value))
        if clean in ALLOWED_INSTRUMENTS
    ]
    if PRIMARY_INSTRUMENT not in instruments:
        instruments.insert(0, PRIMARY_INSTRUMENT)
    return instruments


def normalize_key_offset(value: Any) -> Union[int, float]:
    """
    Coerce a transposition offset to a finite number, defaulting to 0.

    Accepts numbers, booleans (0/1) and numeric strings; blank strings,
    None and anything unparsable become 0. Whole numbers come back as int.

    Strings follow the front-end's number syntax: decimal with optional
    exponent, or unsigned 0x / 0o / 0b integers. Python-only spellings
    such as "1_000", "nan" or "inf" are not numbers here. Integers too
    large for a float count as infinite, hence 0.
    """
    if isinstance(value, bool):
        return int(value)

    if isinstance(value, (int, float)):
        number = _to_float(value)
    elif isinstance(value, str):
        number = _parse_number(value.strip())
    else:
        return 0

    if number is None or not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


# ── Helpers ───────────────────────────────────────────────────────────────


def _to_float(value: Union[int, float]) -> Optional[float]:
    try:
        return float(value)
    except OverflowError:
        return None


def _parse_number(text: str) -> Optional[float]:
    if not text:
        return 0.0
    if _DECIMAL_NUMBER.fullmatch(text):
        return float(text)
    if _PREFIXED_INTEGER.fullmatch(text):
        return _to_float(int(text, 0))
    return None


def _clean_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    return value.strip()


def _split_items(value: Any) -> List[Any]:
    # Lists pass through; "lucio, cristiano" is split on commas
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        return value.split(",")
    return []


def _normalize_token(item: Any) -> Optional[str]:
    if not isinstance(item, str):
        return None
    return item.strip().lower()
