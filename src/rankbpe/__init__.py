"""rankbpe: rank-based byte pair encoding over tiktoken dictionaries."""

from ._models.base import BPEProcessor
from ._models.basic import TiktokenProcessor
from ._models.regex import RegexTiktokenProcessor
from .config import REPLACEMENT_CHAR, ProcessorConfig
from .dictionary import Dictionary
from .errors import (
    ConfigError,
    DecodeError,
    InvalidRankError,
    LoadError,
    PatternError,
    RankBPEError,
)
from .factory import from_dictionary, get_processor
from .pattern import TokenPattern, get_pattern, list_patterns

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("rankbpe")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "BPEProcessor",
    "TiktokenProcessor",
    "RegexTiktokenProcessor",
    "Dictionary",
    "ProcessorConfig",
    "REPLACEMENT_CHAR",
    "TokenPattern",
    "RankBPEError",
    "LoadError",
    "ConfigError",
    "PatternError",
    "DecodeError",
    "InvalidRankError",
    "get_processor",
    "from_dictionary",
    "get_pattern",
    "list_patterns",
]
