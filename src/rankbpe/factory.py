"""Factory functions for creating processors."""

import logging
from collections.abc import Iterable, Mapping
from os import PathLike
from typing import overload

from ._models.base import BPEProcessor
from ._models.basic import TiktokenProcessor
from ._models.regex import RegexTiktokenProcessor
from .config import ProcessorConfig
from .dictionary import Dictionary
from .pattern import TokenPattern, resolve_pattern
from .types import Rank

log = logging.getLogger(__name__)


@overload
def get_processor(
    dictionary_path: str | PathLike,
    replacement: bytes = ...,
    keep_unknown_bytes: bool = ...,
    special_tokens: Mapping[str | bytes, Rank] | None = ...,
    allowed_special: Iterable[str | bytes] = ...,
    pattern: None = ...,
) -> TiktokenProcessor: ...


@overload
def get_processor(
    dictionary_path: str | PathLike,
    replacement: bytes = ...,
    keep_unknown_bytes: bool = ...,
    special_tokens: Mapping[str | bytes, Rank] | None = ...,
    allowed_special: Iterable[str | bytes] = ...,
    *,
    pattern: str | TokenPattern,
) -> RegexTiktokenProcessor: ...


def get_processor(
    dictionary_path: str | PathLike,
    replacement: bytes = b"",
    keep_unknown_bytes: bool = False,
    special_tokens: Mapping[str | bytes, Rank] | None = None,
    allowed_special: Iterable[str | bytes] = (),
    pattern: str | TokenPattern | None = None,
) -> BPEProcessor:
    """
    Load a dictionary file and create a processor for it.

    Passing ``pattern`` selects the regex pre-tokenizing processor; otherwise
    the core processor is returned.

    :param dictionary_path: Path to a tiktoken vocabulary file.
    :param replacement: Bytes substituted for invalid UTF-8 runs on decode.
                        Empty returns raw bytes.
    :param keep_unknown_bytes: Reserved, currently has no effect.
    :param special_tokens: Special token -> rank mapping layered over the vocabulary.
    :param allowed_special: Special tokens recognised while encoding; all
                            others are stripped from input.
    :param pattern: A :class:`TokenPattern` member or a raw regex string. Strings
                    are never looked up by name; use :func:`get_pattern` for that.
    :return: Configured processor instance.
    :raises LoadError: If the dictionary file is unreadable or malformed.
    :raises ConfigError: If special tokens collide or are not registered.
    :raises PatternError: If the pattern does not compile.

    .. code-block:: python

        proc = get_processor(
            "cl100k_base.tiktoken",
            replacement="\N{REPLACEMENT CHARACTER}".encode(),
            special_tokens={"<|endoftext|>": 100257},
            allowed_special=["<|endoftext|>"],
            pattern=TokenPattern.CL100K,
        )
        ranks = proc.encode("Hello world")
    """
    config = ProcessorConfig(
        replacement=replacement,
        keep_unknown_bytes=keep_unknown_bytes,
        pattern=resolve_pattern(pattern) if pattern is not None else None,
    )
    dictionary = Dictionary.from_file(dictionary_path, special_tokens, allowed_special)
    return from_dictionary(dictionary, config)


def from_dictionary(
    dictionary: Dictionary, config: ProcessorConfig | None = None
) -> BPEProcessor:
    """Create a processor over an already built dictionary."""
    config = config if config is not None else ProcessorConfig()
    if config.pattern is None:
        processor: BPEProcessor = TiktokenProcessor(dictionary, config)
    else:
        processor = RegexTiktokenProcessor.from_dictionary(dictionary, config)
    log.info(f"created {processor.PROCESSOR_TYPE} processor")
    return processor
