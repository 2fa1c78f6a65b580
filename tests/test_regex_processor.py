"""Unit tests for the regex pre-tokenizing processor and built-in patterns."""

import pytest
import regex as re

import rankbpe
from rankbpe import PatternError, RegexTiktokenProcessor, TokenPattern

from conftest import SYSTEM

LETTERS_OR_SPACES = r"\p{L}+|\s+"


@pytest.fixture
def regex_processor(vocab_path):
    """Regex processor splitting letter runs from whitespace runs."""
    return rankbpe.get_processor(
        vocab_path, replacement=rankbpe.REPLACEMENT_CHAR, pattern=LETTERS_OR_SPACES
    )


# Encoding
# ---------------------------------------------------------------------------


def test_selected_by_pattern(regex_processor):
    """Passing a pattern selects the wrapper."""
    assert isinstance(regex_processor, RegexTiktokenProcessor)
    assert regex_processor.PROCESSOR_TYPE == "regex"
    assert regex_processor.pat == LETTERS_OR_SPACES


def test_no_match_falls_back_to_core(regex_processor, processor):
    """When the pattern matches nothing the whole input goes to the core."""
    text = "12,34!"
    assert regex_processor.encode(text) == processor.encode(text)


def test_matches_are_encoded_independently(regex_processor, processor):
    """Merges never cross match boundaries."""
    # core merges " w" (308); the split keeps the space apart
    assert processor.encode("hello world") == [307, 312]
    assert regex_processor.encode("hello world") == [307, ord(" "), ord("w"), 309, 311]


def test_unmatched_gaps_are_dropped(regex_processor):
    """Input not covered by any match is excluded from the output."""
    assert regex_processor.encode("ab,12cd") == [300, 301]


def test_empty_input(regex_processor):
    assert regex_processor.encode("") == []


def test_empty_pattern_matches_only_empty_chunks(vocab_path):
    """An empty pattern matches at every position but never consumes input."""
    proc = rankbpe.get_processor(vocab_path, pattern="")
    assert isinstance(proc, RegexTiktokenProcessor)
    assert proc.encode("hello world") == []


def test_non_text_input_raises(regex_processor):
    with pytest.raises(TypeError, match="expected str or bytes-like"):
        regex_processor.encode(5)


def test_bytes_like_input(regex_processor):
    assert regex_processor.encode(bytearray(b"hello world")) == [
        307,
        ord(" "),
        ord("w"),
        309,
        311,
    ]


def test_decode_delegates_to_core(regex_processor, processor):
    """Pre-tokenization never changes the rank-to-text mapping."""
    ranks = [307, 312, 0xFF]
    assert regex_processor.decode_bytes(ranks) == processor.decode_bytes(ranks)
    assert regex_processor.processor.config is regex_processor.config
    assert regex_processor.vocab_size() == processor.vocab_size()


def test_invalid_utf8_input_preserved(vocab_path):
    """Undecodable input bytes reach the core encoder unchanged."""
    proc = rankbpe.get_processor(vocab_path, pattern=TokenPattern.CL100K)
    data = bytes([0xF0, 0x28, 0x8C, 0x28])
    assert proc.decode_bytes(proc.encode(data)) == data


def test_special_tokens_pass_through_matches(vocab_path):
    """A special token fully inside one match is kept atomic."""
    proc = rankbpe.get_processor(
        vocab_path,
        special_tokens={"<|SYSTEM|>": SYSTEM},
        allowed_special=["<|SYSTEM|>"],
        pattern=r"\S+",
    )
    assert proc.encode("a<|SYSTEM|>b cd") == [ord("a"), SYSTEM, ord("b"), 301]


@pytest.mark.parametrize("text", ["Hello world", "it's 100% awesome!\n", "你好世界"])
def test_roundtrip_builtin_pattern(vocab_path, text):
    """Patterns that partition the input round-trip exactly."""
    proc = rankbpe.get_processor(
        vocab_path, replacement=rankbpe.REPLACEMENT_CHAR, pattern=TokenPattern.CL100K
    )
    assert proc.decode(proc.encode(text)) == text


# Construction
# ---------------------------------------------------------------------------


def test_invalid_pattern_raises(vocab_path):
    """A pattern that does not compile fails construction."""
    with pytest.raises(PatternError) as exc_info:
        rankbpe.get_processor(vocab_path, pattern="(unclosed")
    assert isinstance(exc_info.value, rankbpe.ConfigError)
    assert exc_info.value.pattern == "(unclosed"


def test_pattern_string_is_raw_regex(vocab_path):
    """A string spelling a built-in name is compiled verbatim, not looked up."""
    proc = rankbpe.get_processor(vocab_path, pattern="gpt2")
    assert proc.pat == "gpt2"
    assert proc.encode("a gpt2 b") == [ord("g"), ord("p"), ord("t"), ord("2")]


def test_pattern_member_resolves_to_regex(vocab_path):
    proc = rankbpe.get_processor(vocab_path, pattern=TokenPattern.GPT2)
    assert proc.pat == TokenPattern.R50K.value


def test_from_dictionary_requires_pattern(dictionary):
    with pytest.raises(PatternError):
        RegexTiktokenProcessor.from_dictionary(dictionary, rankbpe.ProcessorConfig())


def test_from_dictionary_factory(dictionary):
    """The factory picks the variant from the configuration."""
    config = rankbpe.ProcessorConfig(pattern=r"\w+")
    assert isinstance(rankbpe.from_dictionary(dictionary, config), RegexTiktokenProcessor)
    assert isinstance(rankbpe.from_dictionary(dictionary), rankbpe.TiktokenProcessor)


# Built-in patterns
# ---------------------------------------------------------------------------


def test_builtin_pattern_names():
    """Patterns resolve by name, case-insensitively, with aliases."""
    assert rankbpe.get_pattern("cl100k_base") == TokenPattern.CL100K.value
    assert rankbpe.get_pattern("GPT4") == TokenPattern.CL100K.value
    assert rankbpe.get_pattern("gpt2") == TokenPattern.R50K.value
    assert rankbpe.get_pattern("o200k-base") == TokenPattern.GPT4O.value
    assert "CL100K" in rankbpe.list_patterns()


def test_unknown_pattern_name_raises():
    with pytest.raises(PatternError, match="unknown pattern"):
        rankbpe.get_pattern("not-a-pattern")


def test_builtin_patterns_compile():
    for pat in TokenPattern:
        re.compile(pat.value)


def test_cl100k_pattern_splits():
    """The cl100k pattern splits contractions, numbers and punctuation."""
    chunks = re.findall(TokenPattern.CL100K.value, "Hello you're 1234 cool!")
    assert chunks == ["Hello", " you", "'re", " ", "123", "4", " cool", "!"]


def test_words_pattern_splits():
    """Words keep their contraction and one leading space; extra spaces are gaps."""
    chunks = re.findall(TokenPattern.WORDS.value, "Hello you're 100% awesome.")
    assert chunks == ["Hello", " you're", " 100", "%", " awesome", "."]
    assert re.findall(TokenPattern.WORDS.value, "a  b") == ["a", " b"]


def test_words_pattern_encoding(vocab_path):
    """The leading space stays with its word, so " world" merges whole."""
    proc = rankbpe.get_processor(vocab_path, pattern=TokenPattern.WORDS)
    assert proc.encode("hello world") == [307, 312]
