"""Built-in pre-tokenization patterns."""

from enum import Enum

from .errors import PatternError


class TokenPattern(str, Enum):
    """
    Pre-defined regex patterns matching reference tokenizer dictionaries.

    Sources:
    - OpenAI: https://github.com/openai/tiktoken/blob/main/tiktoken_ext/openai_public.py
    - Others: https://github.com/ggerganov/llama.cpp
    """

    # OpenAI dictionaries
    R50K = (
        r"'(?:[sdmt]|ll|ve|re)|"
        r" ?\p{L}+|"
        r" ?\p{N}+|"
        r" ?[^\s\p{L}\p{N}]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )
    GPT2 = R50K
    P50K = R50K

    CL100K = (
        r"'(?i:[sdmt]|ll|ve|re)|"
        r"[^\r\n\p{L}\p{N}]?+\p{L}+|"
        r"\p{N}{1,3}|"
        r" ?[^\s\p{L}\p{N}]++[\r\n]*|"
        r"\s*[\r\n]|"
        r"\s+(?!\S)|"
        r"\s+"
    )
    GPT4 = CL100K

    O200K = (
        r"[^\r\n\p{L}\p{N}]?[\p{Lu}\p{Lt}\p{Lm}\p{Lo}\p{M}]*[\p{Ll}\p{Lm}\p{Lo}\p{M}]+(?i:'s|'t|'re|'ve|'m|'ll|'d)?|"
        r"[^\r\n\p{L}\p{N}]?[\p{Lu}\p{Lt}\p{Lm}\p{Lo}\p{M}]+[\p{Ll}\p{Lm}\p{Lo}\p{M}]*(?i:'s|'t|'re|'ve|'m|'ll|'d)?|"
        r"\p{N}{1,3}|"
        r" ?[^\s\p{L}\p{N}]+[\r\n/]*|"
        r"\s*[\r\n]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )
    GPT4O = O200K

    # Meta models
    LLAMA3 = (
        r"(?:'[sS]|'[tT]|'[rR][eE]|'[vV][eE]|'[mM]|'[lL][lL]|'[dD])|"
        r"[^\r\n\p{L}\p{N}]?\p{L}+|"
        r"\p{N}{1,3}|"
        r" ?[^\s\p{L}\p{N}]+[\r\n]*|"
        r"\s*[\r\n]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )

    # Alibaba models
    QWEN2 = (
        r"(?:'[sS]|'[tT]|'[rR][eE]|'[vV][eE]|'[mM]|'[lL][lL]|'[dD])|"
        r"[^\r\n\p{L}\p{N}]?\p{L}+|"
        r"\p{N}|"  # single digits (different from LLAMA3)
        r" ?[^\s\p{L}\p{N}]+[\r\n]*|"
        r"\s*[\r\n]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )

    # letter, digit and punctuation runs only; whitespace is attached or dropped
    WORDS = (
        r" ?\p{L}+(?:'(?:s|m|d|ll|re|ve|t|nt))?|"
        r" ?\p{N}+|"
        r" ?[^\s\p{L}\p{N}]+"
    )

    @classmethod
    def get(cls, name: str) -> str:
        """Get patterns by name (case-insensitive)."""
        try:
            return cls[_normalise(name)].value
        except KeyError:
            raise PatternError(
                f"unknown pattern: {name!r}. "
                f"valid patterns: {', '.join(cls.__members__)}"
            ) from None


def _normalise(name: str) -> str:
    return name.upper().replace("-", "_").removesuffix("_BASE")


def get_pattern(name: str) -> str:
    """Return the regex of a built-in pattern, e.g. ``"cl100k_base"`` or ``"gpt2"``."""
    return TokenPattern.get(name)


def list_patterns() -> list[str]:
    """Return names of all available built-in patterns, aliases included."""
    return list(TokenPattern.__members__)


def resolve_pattern(pattern: "str | TokenPattern") -> str:
    """
    Turn a built-in pattern into its regex.

    Plain strings are always raw regular expressions and are returned
    unchanged, even when they spell a built-in name such as ``"gpt2"``.
    Look names up explicitly with :func:`get_pattern`.
    """
    if isinstance(pattern, TokenPattern):
        return pattern.value
    return pattern


__all__ = ["TokenPattern", "get_pattern", "list_patterns", "resolve_pattern"]
