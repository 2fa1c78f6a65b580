"""Shared fixtures: small synthetic tiktoken vocabularies."""

import base64

import pytest

import rankbpe

# special token ranks used across tests
SYSTEM = 1 << 62
USER = 2 << 62

# merged tokens layered over the 256 single bytes (rank == byte value)
MERGES: dict[bytes, int] = {
    b"ab": 300,
    b"cd": 301,
    b"abcd": 302,
    b"aa": 303,
    b"he": 304,
    b"ll": 305,
    b"hell": 306,
    b"hello": 307,
    b" w": 308,
    b"or": 309,
    b" wor": 310,
    b"ld": 311,
    b" world": 312,
}


def vocab_lines(entries: dict[bytes, int]) -> list[str]:
    """Render token -> rank entries as tiktoken lines."""
    return [f"{base64.b64encode(tok).decode('ascii')} {rank}\n" for tok, rank in entries.items()]


def base_entries() -> dict[bytes, int]:
    entries = {bytes([b]): b for b in range(256)}
    entries.update(MERGES)
    return entries


@pytest.fixture
def vocab_path(tmp_path):
    """Write the synthetic vocabulary to disk and return its path."""
    path = tmp_path / "synthetic.tiktoken"
    path.write_text("".join(vocab_lines(base_entries())), encoding="utf-8")
    return path


@pytest.fixture
def dictionary(vocab_path):
    """Dictionary without special tokens."""
    return rankbpe.Dictionary.from_file(vocab_path)


@pytest.fixture
def processor(vocab_path):
    """Core processor that replaces invalid UTF-8 with U+FFFD."""
    return rankbpe.get_processor(vocab_path, replacement=rankbpe.REPLACEMENT_CHAR)


@pytest.fixture
def raw_processor(vocab_path):
    """Core processor in raw-bytes mode."""
    return rankbpe.get_processor(vocab_path)
