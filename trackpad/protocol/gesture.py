"""Gesture token codec for the client-to-server gesture stream"""

from __future__ import annotations

from trackpad.common.types import GestureToken

_TOKENS_BY_LITERAL: dict[str, GestureToken] = {
    token.value: token for token in GestureToken if token.isKnown()
}


class GestureCodec:
    """Encodes and decodes gesture tokens (pure and stateless)"""

    ENCODING = "utf-8"
    TERMINATOR = "\n"

    @staticmethod
    def text_decode(raw: bytes) -> str:
        """
        Decode raw bytes of one read event into trimmed text

        Invalid UTF-8 sequences are replaced rather than rejected, so malformed
        input simply fails to match the vocabulary.

        Args:
            raw: Bytes from one read

        Returns:
            Text with surrounding whitespace and newlines removed
        """
        return raw.decode(GestureCodec.ENCODING, errors="replace").strip()

    @staticmethod
    def token_decode(raw: bytes) -> GestureToken:
        """
        Decode one read event into a gesture token

        Matching is exact and case-sensitive against the whole trimmed
        string, emoji prefix included.

        Args:
            raw: Bytes from one read

        Returns:
            Matching token, or GestureToken.UNKNOWN
        """
        text = GestureCodec.text_decode(raw)
        return _TOKENS_BY_LITERAL.get(text, GestureToken.UNKNOWN)

    @staticmethod
    def token_encode(token: GestureToken) -> bytes:
        """
        Encode a token as it is written by a client (literal plus newline)

        Args:
            token: Token to encode

        Returns:
            Wire bytes

        Raises:
            ValueError: If token is GestureToken.UNKNOWN
        """
        if not token.isKnown():
            raise ValueError("UNKNOWN has no wire literal")
        return (token.value + GestureCodec.TERMINATOR).encode(GestureCodec.ENCODING)

    @staticmethod
    def tokenByName_get(name: str) -> GestureToken:
        """
        Resolve a token from its symbolic name (e.g. 'zoom_in', 'SWIPE-LEFT')

        Args:
            name: Case-insensitive token name, '-' accepted for '_'

        Returns:
            Matching known token

        Raises:
            ValueError: If no known token has that name
        """
        key = name.strip().upper().replace("-", "_")
        try:
            token = GestureToken[key]
        except KeyError:
            token = GestureToken.UNKNOWN
        if not token.isKnown():
            known = ", ".join(t.name.lower() for t in GestureToken if t.isKnown())
            raise ValueError(f"Unknown gesture '{name}'. Known gestures: {known}")
        return token
