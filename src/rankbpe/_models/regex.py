"""Regex pre-tokenizing processor."""

import logging
from collections.abc import Sequence
from typing import override

import regex as re

from ..config import ProcessorConfig
from ..dictionary import Dictionary
from ..errors import PatternError
from ..types import Rank
from .base import BPEProcessor, as_input_bytes
from .basic import TiktokenProcessor

log = logging.getLogger(__name__)


class RegexTiktokenProcessor(BPEProcessor):
    """
    Processor that splits text with a regex pattern before applying BPE.

    Wraps a :class:`TiktokenProcessor`. Every pattern match is encoded on its
    own and the results are concatenated; text not covered by any match is
    dropped. When the pattern matches nothing, the whole input goes to the
    wrapped processor unchanged.
    """

    PROCESSOR_TYPE = "regex"

    def __init__(self, processor: TiktokenProcessor, pattern: str) -> None:
        """
        Wrap ``processor`` with pre-tokenization by ``pattern``.

        :raises PatternError: If ``pattern`` is not a valid regex.
        """
        super().__init__()
        self._processor = processor
        self.pat = pattern
        self.compiled_pat = _compile_pattern(pattern)

    @classmethod
    def from_dictionary(
        cls, dictionary: Dictionary, config: ProcessorConfig
    ) -> "RegexTiktokenProcessor":
        """Build the wrapped processor and wrapper from ``config.pattern``."""
        if config.pattern is None:
            raise PatternError("pre-tokenization pattern is required")
        return cls(TiktokenProcessor(dictionary, config), config.pattern)

    @property
    def processor(self) -> TiktokenProcessor:
        """The wrapped core processor."""
        return self._processor

    @property
    @override
    def dictionary(self) -> Dictionary:
        return self._processor.dictionary

    @property
    @override
    def config(self) -> ProcessorConfig:
        return self._processor.config

    @override
    def encode(self, text: str | bytes) -> list[Rank]:
        """
        Encode text chunk by chunk as split by the pattern.

        Bytes that are not valid UTF-8 are matched as lone surrogates and
        restored exactly before encoding.

        :param text: Text to encode; ``str`` is encoded as UTF-8.
        :raises TypeError: If ``text`` is neither ``str`` nor bytes-like.
        """
        data = as_input_bytes(text)
        decoded = data.decode("utf-8", errors="surrogateescape")
        chunks = [m.group(0) for m in self.compiled_pat.finditer(decoded)]

        if not chunks:
            log.debug("pattern matched nothing, encoding whole input")
            return self._processor.encode(data)

        ranks: list[Rank] = []
        for chunk in chunks:
            ranks.extend(
                self._processor.encode(chunk.encode("utf-8", errors="surrogateescape"))
            )
        return ranks

    @override
    def decode_bytes(self, ranks: Sequence[Rank]) -> bytes:
        """Decode ranks with the wrapped processor."""
        return self._processor.decode_bytes(ranks)


def _compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile and validate a regex pattern.

    :param pattern: Regex pattern string to compile.
    :return: Compiled regex pattern.
    :raises PatternError: If pattern is invalid.
    """
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise PatternError("invalid regex pattern", pattern=pattern, regex_err=e) from e
    log.debug(f"compiled pre-tokenization pattern {pattern!r}")
    return compiled
