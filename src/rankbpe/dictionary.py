"""
Bijective token <-> rank dictionary loaded from tiktoken-style vocabulary files.

A vocabulary resource is UTF-8 text with one ``<base64 token> <decimal rank>``
entry per line. Lines without a space carry no data and are skipped.
"""

import base64
import binascii
import logging
from collections.abc import Iterable, Mapping
from os import PathLike
from pathlib import Path
from types import MappingProxyType

import regex as re

from ._decorators import measure_time
from ._sanitise import render_bytes
from .errors import ConfigError, LoadError
from .types import MAX_RANK, Rank, RankTokens, Token, TokenRanks

log = logging.getLogger(__name__)

_RANK_PAT = re.compile(r"[0-9]+")


class Dictionary:
    """
    Immutable bijection between tokens (``bytes``) and ranks (``int``).

    Built once from base vocabulary entries plus caller-supplied special tokens.
    A subset of the special tokens is marked allowed; only those are recognised
    as atomic units while encoding.
    """

    def __init__(
        self,
        mergeable_ranks: Mapping[Token, Rank],
        special_tokens: Mapping[str | bytes, Rank] | None = None,
        allowed_special: Iterable[str | bytes] = (),
    ) -> None:
        """
        Build the dictionary and validate the bijection.

        :param mergeable_ranks: Base vocabulary, token bytes -> rank.
        :param special_tokens: Special tokens layered on top of the base vocabulary.
            ``str`` keys are encoded as UTF-8.
        :param allowed_special: Special tokens recognised while encoding.
        :raises ConfigError: On any rank or token collision, an out-of-range rank,
            an empty special token, or an allowed token that is not registered.
        """
        token_ranks: TokenRanks = {}
        rank_tokens: RankTokens = {}

        for token, rank in mergeable_ranks.items():
            if not isinstance(token, bytes):
                raise ConfigError(
                    f"vocabulary token must be bytes, got {type(token).__name__}"
                )
            _check_rank(rank, token)
            if rank in rank_tokens:
                raise ConfigError(
                    f"duplicate rank in vocabulary, already assigned to "
                    f"{render_bytes(rank_tokens[rank])!r}",
                    token=token,
                    rank=rank,
                )
            token_ranks[token] = rank
            rank_tokens[rank] = token

        n_base = len(token_ranks)

        # layer special tokens over the base vocabulary
        specials: TokenRanks = {}
        for seq, rank in (special_tokens or {}).items():
            token = _to_token(seq)
            _check_rank(rank, token)
            if not token:
                raise ConfigError("special token must not be empty", rank=rank)
            if token in specials:
                raise ConfigError("special token registered twice", token=token)
            if rank in rank_tokens:
                raise ConfigError(
                    f"rank already assigned to {render_bytes(rank_tokens[rank])!r}, "
                    f"cannot register special token",
                    token=token,
                    rank=rank,
                )
            if token in token_ranks:
                raise ConfigError(
                    f"token already has rank {token_ranks[token]}, "
                    f"cannot register as special token",
                    token=token,
                    rank=rank,
                )
            token_ranks[token] = rank
            rank_tokens[rank] = token
            specials[token] = rank
            log.debug(f"registered special token {render_bytes(token)!r} -> {rank}")

        allowed: set[Token] = set()
        for seq in allowed_special:
            token = _to_token(seq)
            if token not in specials:
                raise ConfigError(
                    "allowed special token not part of special tokens", token=token
                )
            allowed.add(token)

        self._token_ranks = MappingProxyType(token_ranks)
        self._rank_tokens = MappingProxyType(rank_tokens)
        self._special = MappingProxyType(specials)
        self._allowed = frozenset(allowed)
        self._n_base = n_base

        missing = sum(1 for b in range(256) if bytes([b]) not in token_ranks)
        if n_base and missing:
            log.warning(f"vocabulary lacks {missing} of 256 single-byte tokens")

    @classmethod
    def from_lines(
        cls,
        lines: Iterable[str],
        special_tokens: Mapping[str | bytes, Rank] | None = None,
        allowed_special: Iterable[str | bytes] = (),
        *,
        source: str | None = None,
    ) -> "Dictionary":
        """
        Parse tiktoken-format lines into a dictionary.

        The first definition of a token or rank wins; any later entry reusing
        either is rejected rather than overwritten.

        :param lines: Vocabulary lines, trailing newlines allowed.
        :param source: Resource name used in error messages.
        :raises LoadError: On malformed base64, malformed rank or duplicate entries.
        :raises ConfigError: On special token misconfiguration.
        """
        ranks: TokenRanks = {}
        seen_ranks: RankTokens = {}

        for line_no, line in enumerate(lines, start=1):
            entry = _parse_line(line, line_no, source)
            # no delimiter: not a data line
            if entry is None:
                continue
            token, rank = entry

            if token in ranks:
                raise LoadError(
                    f"duplicate token {render_bytes(token)!r}, already has rank "
                    f"{ranks[token]}",
                    path=source,
                    line_no=line_no,
                    line=line.rstrip("\r\n"),
                )
            if rank in seen_ranks:
                raise LoadError(
                    f"duplicate rank {rank}, already assigned to "
                    f"{render_bytes(seen_ranks[rank])!r}",
                    path=source,
                    line_no=line_no,
                    line=line.rstrip("\r\n"),
                )
            ranks[token] = rank
            seen_ranks[rank] = token

        return cls(ranks, special_tokens, allowed_special)

    @classmethod
    @measure_time
    def from_file(
        cls,
        path: str | PathLike,
        special_tokens: Mapping[str | bytes, Rank] | None = None,
        allowed_special: Iterable[str | bytes] = (),
    ) -> "Dictionary":
        """
        Load a dictionary from a tiktoken vocabulary file.

        :param path: Location of the vocabulary file.
        :raises LoadError: If the file cannot be read or contains malformed entries.
        :raises ConfigError: On special token misconfiguration.
        """
        path = Path(path)
        log.info(f"loading dictionary from {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                dictionary = cls.from_lines(
                    f, special_tokens, allowed_special, source=str(path)
                )
        except OSError as e:
            raise LoadError("cannot open vocabulary file", path=str(path)) from e
        except UnicodeDecodeError as e:
            raise LoadError("vocabulary file is not valid UTF-8", path=str(path)) from e

        log.info(
            f"dictionary loaded: {dictionary.n_base} base tokens, "
            f"{len(dictionary.special_tokens)} special tokens "
            f"({len(dictionary.allowed_special)} allowed)"
        )
        return dictionary

    def save(self, path: str | PathLike) -> None:
        """
        Write the base vocabulary to ``path`` in tiktoken format, ordered by rank.

        Special tokens are not written; they are supplied at construction.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        log.debug(f"saving {self._n_base} tokens to {path}")

        entries = sorted(
            (rank, token)
            for token, rank in self._token_ranks.items()
            if token not in self._special
        )
        with path.open("w", encoding="utf-8", newline="\n") as f:
            for rank, token in entries:
                f.write(f"{base64.b64encode(token).decode('ascii')} {rank}\n")

    @property
    def token_ranks(self) -> Mapping[Token, Rank]:
        """Read-only token -> rank mapping, special tokens included."""
        return self._token_ranks

    @property
    def rank_tokens(self) -> Mapping[Rank, Token]:
        """Read-only rank -> token mapping, special tokens included."""
        return self._rank_tokens

    @property
    def special_tokens(self) -> Mapping[Token, Rank]:
        """Registered special tokens."""
        return self._special

    @property
    def allowed_special(self) -> frozenset[Token]:
        """Special tokens recognised as atomic units while encoding."""
        return self._allowed

    @property
    def n_base(self) -> int:
        """Number of entries loaded from the base vocabulary."""
        return self._n_base

    def rank_of(self, token: Token) -> Rank | None:
        return self._token_ranks.get(token)

    def token_of(self, rank: Rank) -> Token | None:
        return self._rank_tokens.get(rank)

    def is_special(self, token: Token) -> bool:
        return token in self._special

    def __len__(self) -> int:
        return len(self._token_ranks)

    def __contains__(self, token: object) -> bool:
        return token in self._token_ranks

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(base={self._n_base}, "
            f"special={len(self._special)}, allowed={len(self._allowed)})"
        )


def _to_token(seq: str | bytes) -> Token:
    """Normalise a special token given as text or bytes."""
    if isinstance(seq, str):
        return seq.encode("utf-8")
    if isinstance(seq, (bytes, bytearray)):
        return bytes(seq)
    raise ConfigError(f"special token must be str or bytes, got {type(seq).__name__}")


def _check_rank(rank: object, token: Token | None = None) -> None:
    """Ensure ``rank`` is an unsigned 64-bit integer."""
    # bool is an int subclass but never a meaningful rank
    if not isinstance(rank, int) or isinstance(rank, bool):
        raise ConfigError(f"rank must be an int, got {type(rank).__name__}", token=token)
    if not 0 <= rank <= MAX_RANK:
        raise ConfigError("rank outside unsigned 64-bit range", token=token, rank=rank)


def _parse_line(
    line: str, line_no: int, source: str | None
) -> tuple[Token, Rank] | None:
    """Parse one vocabulary line; ``None`` for lines without a delimiter."""
    line = line.rstrip("\r\n")
    enc_token, sep, enc_rank = line.partition(" ")
    if not sep:
        return None

    try:
        token = base64.b64decode(enc_token, validate=True)
    except (binascii.Error, ValueError) as e:
        raise LoadError(
            "invalid base64 data", path=source, line_no=line_no, line=line
        ) from e

    # strict decimal: no sign, whitespace or digit separators
    if not _RANK_PAT.fullmatch(enc_rank):
        raise LoadError(
            "invalid number format", path=source, line_no=line_no, line=line
        )
    rank = int(enc_rank)
    if rank > MAX_RANK:
        raise LoadError(
            "rank outside unsigned 64-bit range",
            path=source,
            line_no=line_no,
            line=line,
        )

    return token, rank
