"""
Core types for rank-based BPE processing.
"""

type Token = bytes
type Rank = int
type TokenRanks = dict[Token, Rank]
type RankTokens = dict[Rank, Token]

# ranks are unsigned 64-bit integers
MAX_RANK: int = 2**64 - 1
