"""Special token filtering and segmentation for encoding."""

import logging
from collections.abc import Iterable

import regex as re

from .errors import PatternError
from .types import Token

log = logging.getLogger(__name__)

# single-byte tokens, indexed by byte value
_BYTE_TOKENS: list[Token] = [bytes([b]) for b in range(256)]


def explode(data: bytes) -> list[Token]:
    """Split ``data`` into one single-byte token per byte."""
    return [_BYTE_TOKENS[b] for b in data]


class SpecialTokenFilter:
    """
    Strips disallowed special tokens and keeps allowed ones as atomic segments.

    Registered special tokens that are not allowed are deleted from the input
    outright: they leave no trace in the encoded output, not even as bytes.
    Allowed special tokens are matched with one alternation pattern compiled at
    construction and survive as single tokens that carry their registered rank.
    """

    def __init__(self, special_toks: Iterable[Token], allowed: Iterable[Token]) -> None:
        allowed = frozenset(allowed)
        # longest first: a token that prefixes another must not shadow it
        self.allowed: tuple[Token, ...] = tuple(sorted(allowed, key=_length_order))
        self.disallowed: tuple[Token, ...] = tuple(
            sorted((tok for tok in special_toks if tok not in allowed), key=_length_order)
        )
        self._pattern: re.Pattern[bytes] | None = None

        if self.allowed:
            # escape regex metachars like "|" in special tokens to avoid unwanted effects
            special_pat = b"(" + b"|".join(re.escape(tok) for tok in self.allowed) + b")"
            try:
                self._pattern = re.compile(special_pat)
            except re.error as e:
                raise PatternError(
                    "could not create regex for allowed special tokens",
                    pattern=special_pat,
                    regex_err=e,
                ) from e
            log.debug(f"compiled allowed special token pattern: {special_pat!r}")

    def strip(self, text: bytes) -> bytes:
        """Delete every occurrence of every disallowed special token."""
        for tok in self.disallowed:
            text = text.replace(tok, b"")
        return text

    def segment(self, text: bytes) -> list[Token]:
        """
        Partition ``text`` into allowed special tokens and single bytes.

        Allowed special token matches become one token each; all other text
        between and around them is exploded byte by byte.
        """
        if self._pattern is None:
            return explode(text)

        tokens: list[Token] = []
        last = 0
        for match in self._pattern.finditer(text):
            start, end = match.span()
            # normal text before special token
            tokens.extend(explode(text[last:start]))
            tokens.append(text[start:end])
            last = end
        # trailing normal text after last special token
        tokens.extend(explode(text[last:]))
        return tokens

    def split(self, text: bytes) -> list[Token]:
        """Strip disallowed special tokens, then segment."""
        return self.segment(self.strip(text))


def _length_order(tok: Token) -> tuple[int, Token]:
    return (-len(tok), tok)
