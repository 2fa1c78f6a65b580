"""Core rank-based BPE processor."""

import logging
from collections.abc import Sequence
from typing import override

from .._bpe import bpe_merge, to_valid_utf8
from ..config import ProcessorConfig
from ..dictionary import Dictionary
from ..errors import InvalidRankError
from ..special import SpecialTokenFilter
from ..types import Rank
from .base import BPEProcessor, as_input_bytes

log = logging.getLogger(__name__)


class TiktokenProcessor(BPEProcessor):
    """
    Processor that applies lowest-rank-first BPE merges over raw bytes.

    Input is filtered for special tokens, split into single bytes and allowed
    special tokens, then merged greedily against the dictionary.
    """

    PROCESSOR_TYPE = "tiktoken"

    def __init__(
        self, dictionary: Dictionary, config: ProcessorConfig | None = None
    ) -> None:
        """
        Attach a dictionary and configuration.

        :raises PatternError: If the allowed special tokens cannot be compiled
            into a pattern.
        """
        super().__init__()
        self._dictionary = dictionary
        self._config = config if config is not None else ProcessorConfig()
        # token -> rank for encoding, rank -> token for decoding
        self._ranks = dictionary.token_ranks
        self._tokens = dictionary.rank_tokens
        self._filter = SpecialTokenFilter(
            dictionary.special_tokens, dictionary.allowed_special
        )
        log.debug(
            f"{self.__class__.__name__} ready: {len(dictionary)} tokens, "
            f"raw bytes mode {self._config.raw_bytes}"
        )

    @property
    @override
    def dictionary(self) -> Dictionary:
        return self._dictionary

    @property
    @override
    def config(self) -> ProcessorConfig:
        return self._config

    @override
    def encode(self, text: str | bytes) -> list[Rank]:
        """
        Encode text into a sequence of ranks.

        Disallowed special tokens are deleted from ``text``; allowed ones map to
        their registered rank as one unit. Everything else is BPE-merged from
        single bytes.

        :param text: Text to encode; ``str`` is encoded as UTF-8.
        :returns: Rank sequence, empty for empty input.
        :raises TypeError: If ``text`` is neither ``str`` nor bytes-like.
        """
        data = as_input_bytes(text)

        if not data:
            return []

        # one byte needs no merging; an unknown byte maps to rank 0
        if len(data) == 1:
            return [self._ranks.get(data, 0)]

        tokens = self._filter.split(data)
        tokens = bpe_merge(tokens, self._ranks)

        return [self._ranks.get(tok, 0) for tok in tokens]

    @override
    def decode_bytes(self, ranks: Sequence[Rank]) -> bytes:
        """
        Decode ranks into bytes.

        With a replacement configured every maximal invalid UTF-8 run is
        replaced by one copy of it; otherwise the raw concatenation is returned.

        :raises InvalidRankError: If any rank is unknown. No partial output is produced.
        """
        parts: list[bytes] = []
        for pos, rank in enumerate(ranks):
            tok = self._tokens.get(rank)
            if tok is None:
                raise InvalidRankError(rank, position=pos)
            parts.append(tok)

        data = b"".join(parts)

        if self._config.replacement:
            return to_valid_utf8(data, self._config.replacement)
        return data
