"""Processor implementations for rank-based BPE."""

from .base import BPEProcessor
from .basic import TiktokenProcessor
from .regex import RegexTiktokenProcessor


__all__ = ["BPEProcessor", "TiktokenProcessor", "RegexTiktokenProcessor"]
