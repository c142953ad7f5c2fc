"""
Mchic Setlist — Normalization Pipeline Unit Tests
===================================================

What:  Tests for services.song_validation.
Why:   Every stored song passes through this pipeline; its rejections are
       the only 400s the front-end shows.
How:   Pure function calls, no HTTP and no storage.

Test Strategy:
    ✅ Required fields, checked in order (title before author before voices)
    ✅ Allow-list filtering for voices and instruments
    ✅ Primary instrument always present, instrument duplicates kept
    ✅ keyOffset coercion (strings, blanks, garbage, non-finite)
    ✅ Non-object bodies treated as empty
"""

import pytest

from mchic.exceptions import ValidationError
from mchic.services.song_validation import (
    AUTHOR_REQUIRED,
    TITLE_REQUIRED,
    VOICE_REQUIRED,
    normalize_key_offset,
    normalize_song_payload,
    sanitize_instruments,
    sanitize_voices,
)


class TestRequiredFields:

    def test_valid_body_is_normalized(self):
        payload = normalize_song_payload({
            "author": "  Cristiano ",
            "title": " Prova ",
            "voices": ["lucio", "cristiano"],
            "instruments": ["basso"],
            "keyOffset": 2,
        })
        assert payload.author == "Cristiano"
        assert payload.title == "Prova"
        assert payload.voices == ["lucio", "cristiano"]
        assert payload.instruments == ["chitarra", "basso"]
        assert payload.key_offset == 2

    def test_missing_author_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_song_payload({"title": "X"})
        assert exc_info.value.message == "L'autore è obbligatorio."
        assert exc_info.value.field == "author"

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_song_payload({"title": "   ", "author": "Lucio Dalla", "voices": ["lucio"]})
        assert exc_info.value.message == TITLE_REQUIRED

    def test_title_checked_before_author(self):
        """An empty body reports the title first."""
        with pytest.raises(ValidationError) as exc_info:
            normalize_song_payload({})
        assert exc_info.value.message == TITLE_REQUIRED

    def test_non_string_author_is_missing(self):
        with pytest.raises(ValidationError, match=AUTHOR_REQUIRED):
            normalize_song_payload({"title": "Caruso", "author": 42, "voices": ["lucio"]})

    @pytest.mark.parametrize("body", [None, [], "Caruso", 7])
    def test_non_object_body_treated_as_empty(self, body):
        with pytest.raises(ValidationError, match=TITLE_REQUIRED):
            normalize_song_payload(body)


class TestVoices:

    def test_only_unknown_voices_rejected_with_allow_list(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_song_payload({"title": "A", "author": "B", "voices": ["mina", "celentano"]})
        assert exc_info.value.message == VOICE_REQUIRED
        assert "lucio, cristiano" in exc_info.value.message
        assert exc_info.value.context["allowed"] == ["lucio", "cristiano"]

    def test_missing_voices_rejected(self):
        with pytest.raises(ValidationError, match="Seleziona almeno una voce valida"):
            normalize_song_payload({"title": "A", "author": "B"})

    def test_voices_deduplicated_in_input_order(self):
        assert sanitize_voices(["cristiano", "lucio", "cristiano"]) == ["cristiano", "lucio"]

    def test_voices_case_and_whitespace_insensitive(self):
        assert sanitize_voices([" LUCIO ", "Cristiano"]) == ["lucio", "cristiano"]

    def test_voices_from_comma_separated_string(self):
        assert sanitize_voices("lucio, cristiano") == ["lucio", "cristiano"]

    def test_unknown_and_non_string_voices_dropped(self):
        assert sanitize_voices(["lucio", 3, None, "mina"]) == ["lucio"]


class TestInstruments:

    @pytest.mark.parametrize(
        "value",
        [None, [], ["basso"], ["ukulele"], "basso", 5, ["chitarra"], ["basso", "chitarra"]],
    )
    def test_primary_instrument_always_present(self, value):
        assert "chitarra" in sanitize_instruments(value)

    def test_primary_prepended_when_missing(self):
        assert sanitize_instruments(["basso"]) == ["chitarra", "basso"]

    def test_existing_primary_keeps_its_position(self):
        assert sanitize_instruments(["basso", "chitarra"]) == ["basso", "chitarra"]

    def test_duplicates_kept(self):
        """Two guitars is a valid arrangement; voices dedup, instruments don't."""
        assert sanitize_instruments(["chitarra", "chitarra", "basso"]) == [
            "chitarra",
            "chitarra",
            "basso",
        ]

    def test_unknown_instruments_dropped(self):
        assert sanitize_instruments(["Basso", "batteria"]) == ["chitarra", "basso"]


class TestKeyOffset:

    @pytest.mark.parametrize(
        "value, expected",
        [
            (2, 2),
            (-3, -3),
            (1.5, 1.5),
            (2.0, 2),
            ("3", 3),
            (" -1.5 ", -1.5),
            ("", 0),
            ("   ", 0),
            ("abc", 0),
            (None, 0),
            ([1], 0),
            (True, 1),
            (float("nan"), 0),
            (float("inf"), 0),
            ("inf", 0),
            ("nan", 0),
            (10 ** 400, 0),
            (-(10 ** 400), 0),
            ("1e400", 0),
            ("1_000", 0),
            ("0x10", 16),
            ("0b11", 3),
            ("0o17", 15),
            ("-0x10", 0),
            (".5", 0.5),
            ("5.", 5),
            ("1e2", 100),
        ],
    )
    def test_coercion(self, value, expected):
        result = normalize_key_offset(value)
        assert result == expected
        assert type(result) is type(expected)

    def test_missing_key_offset_defaults_to_zero(self):
        payload = normalize_song_payload({"title": "A", "author": "B", "voices": ["lucio"]})
        assert payload.key_offset == 0
