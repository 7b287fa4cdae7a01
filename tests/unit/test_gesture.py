"""Unit tests for gesture token decoding and encoding"""

import pytest

from trackpad.common.types import GestureToken
from trackpad.protocol.gesture import GestureCodec


class TestTokenDecode:
    """Test GestureCodec.token_decode"""

    @pytest.mark.parametrize("token", [t for t in GestureToken if t.isKnown()])
    def test_every_literal_decodes(self, token):
        """Each vocabulary literal decodes to its token"""
        assert GestureCodec.token_decode(token.value.encode("utf-8")) is token

    def test_zoom_in_with_newline(self):
        """Trailing newline is trimmed before matching"""
        assert GestureCodec.token_decode("\U0001f50d Zoom+\n".encode("utf-8")) is GestureToken.ZOOM_IN

    def test_surrounding_whitespace_trimmed(self):
        """Leading and trailing whitespace and CRLF are trimmed"""
        raw = "  \u2b05\ufe0f Cambio escritorio\r\n".encode("utf-8")
        assert GestureCodec.token_decode(raw) is GestureToken.SWIPE_LEFT

    @pytest.mark.parametrize(
        "raw",
        [
            b"garbage\n",
            b"",
            b"\n",
            b"Zoom+",  # emoji prefix is part of the literal
            "\U0001f50d zoom+".encode("utf-8"),  # case-sensitive
            "\U0001f50d Zoom+ extra".encode("utf-8"),
            "\u27a1 Scroll H".encode("utf-8"),  # missing variation selector
            b"\xff\xfe\xfa",  # invalid UTF-8
        ],
    )
    def test_unmatched_content_is_unknown(self, raw):
        """Anything outside the vocabulary decodes to UNKNOWN"""
        assert GestureCodec.token_decode(raw) is GestureToken.UNKNOWN

    def test_two_tokens_in_one_read_are_unknown(self):
        """Coalesced writes are not split into separate tokens"""
        raw = GestureCodec.token_encode(GestureToken.ZOOM_IN) + GestureCodec.token_encode(
            GestureToken.ZOOM_OUT
        )
        assert GestureCodec.token_decode(raw) is GestureToken.UNKNOWN

    def test_invalid_utf8_replaced_not_raised(self):
        """Decoding never raises on malformed bytes"""
        assert "\ufffd" in GestureCodec.text_decode(b"abc\xff")


class TestTokenEncode:
    """Test GestureCodec.token_encode"""

    def test_encode_appends_newline(self):
        """Encoded token is the literal followed by newline"""
        data = GestureCodec.token_encode(GestureToken.ZOOM_IN)
        assert data == "\U0001f50d Zoom+\n".encode("utf-8")

    def test_encode_unknown_raises(self):
        """UNKNOWN has no wire form"""
        with pytest.raises(ValueError):
            GestureCodec.token_encode(GestureToken.UNKNOWN)


class TestTokenByName:
    """Test symbolic name lookup used by the CLI"""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("zoom_in", GestureToken.ZOOM_IN),
            ("SWIPE_LEFT", GestureToken.SWIPE_LEFT),
            ("pinch-out-five", GestureToken.PINCH_OUT_FIVE),
            (" scroll_up ", GestureToken.SCROLL_UP),
        ],
    )
    def test_known_names(self, name, expected):
        """Names resolve case-insensitively with '-' or '_'"""
        assert GestureCodec.tokenByName_get(name) is expected

    @pytest.mark.parametrize("name", ["unknown", "fly", ""])
    def test_unknown_names_raise(self, name):
        """UNKNOWN and unrecognized names are rejected"""
        with pytest.raises(ValueError, match="Unknown gesture"):
            GestureCodec.tokenByName_get(name)
