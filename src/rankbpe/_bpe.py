"""
Core Byte Pair Encoding (BPE) operations.
"""

from collections.abc import Mapping
from itertools import groupby

from .types import Rank, Token


def bpe_merge(tokens: list[Token], ranks: Mapping[Token, Rank]) -> list[Token]:
    """
    Greedily merge adjacent tokens in place, lowest rank first.

    Every pass scans all adjacent pairs and looks up the concatenation of each
    pair in ``ranks``. The pair whose concatenation has the strictly lowest rank
    is merged; on a tie the leftmost pair wins. Passes repeat until no adjacent
    pair concatenates to a known token.

    Follows the reference approach in
    <https://github.com/openai/tiktoken/blob/main/tiktoken/_educational.py>.

    Each merge removes one token, so at most ``len(tokens) - 1`` passes run and
    total work is O(n^2) in the initial token count.

    :param tokens: Initial token sequence, mutated in place.
    :param ranks: Token -> rank lookup.
    :return: ``tokens`` after all merges.
    """
    while len(tokens) >= 2:
        min_rank: Rank | None = None
        min_idx = -1
        for i in range(len(tokens) - 1):
            rank = ranks.get(tokens[i] + tokens[i + 1])
            # strict comparison keeps the leftmost pair on ties
            if rank is not None and (min_rank is None or rank < min_rank):
                min_rank = rank
                min_idx = i

        # no pair to merge
        if min_idx == -1:
            break

        tokens[min_idx] = tokens[min_idx] + tokens[min_idx + 1]
        del tokens[min_idx + 1]

    return tokens


def _is_escaped(c: str) -> bool:
    """Whether ``c`` is a lone surrogate produced by the surrogateescape handler."""
    return "\udc80" <= c <= "\udcff"


def to_valid_utf8(data: bytes, replacement: bytes) -> bytes:
    """
    Replace each maximal run of invalid UTF-8 bytes with one ``replacement``.

    Valid byte runs are copied unchanged, so the result may be shorter than the
    input when an invalid run spans several bytes.
    """
    # surrogateescape maps every undecodable byte to one lone surrogate
    text = data.decode("utf-8", errors="surrogateescape")
    out = bytearray()
    for invalid, run in groupby(text, key=_is_escaped):
        if invalid:
            out += replacement
        else:
            out += "".join(run).encode("utf-8")
    return bytes(out)
