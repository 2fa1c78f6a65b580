"""
Base processor interface for rank-based BPE implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from ..config import ProcessorConfig
from ..dictionary import Dictionary
from ..types import Rank


def as_input_bytes(text: str | bytes | bytearray | memoryview) -> bytes:
    """
    Normalise encoder input to bytes; ``str`` is encoded as UTF-8.

    :raises TypeError: If ``text`` is not text or a bytes-like buffer.
    """
    if isinstance(text, str):
        return text.encode("utf-8")
    # bytes(int) would silently build a zero-filled buffer
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text)
    raise TypeError(f"expected str or bytes-like input, got {type(text).__name__}")


class BPEProcessor(ABC):
    """
    Abstract base class for BPE processors.

    Encodes text into ranks regardless of its character set, and decodes ranks
    back into bytes. Implementations are immutable after construction and safe
    to share between threads.
    """

    PROCESSOR_TYPE: str = "base"

    @abstractmethod
    def encode(self, text: str | bytes) -> list[Rank]:
        """Encode text into a sequence of ranks."""
        ...

    @abstractmethod
    def decode_bytes(self, ranks: Sequence[Rank]) -> bytes:
        """Decode a sequence of ranks back into bytes."""
        ...

    @property
    @abstractmethod
    def dictionary(self) -> Dictionary:
        """Dictionary backing this processor."""
        ...

    @property
    @abstractmethod
    def config(self) -> ProcessorConfig:
        """Configuration attached at construction."""
        ...

    def decode(self, ranks: Sequence[Rank], errors: str = "strict") -> str:
        """
        Decode ranks into text.

        Bytes are produced by :meth:`decode_bytes`, so a configured replacement
        sequence is applied first; ``errors`` only matters in raw-bytes mode.

        :param errors: Codec error handler for the final UTF-8 decode.
        :raises InvalidRankError: If any rank is not in the dictionary.
        :raises UnicodeDecodeError: If the bytes are not valid UTF-8 and
            ``errors`` is ``"strict"``.
        """
        return self.decode_bytes(ranks).decode("utf-8", errors=errors)

    def vocab_size(self) -> int:
        """Return the number of tokens in the dictionary, special tokens included."""
        return len(self.dictionary)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.dictionary!r})"
