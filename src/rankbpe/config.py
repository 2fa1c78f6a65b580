"""Immutable processor configuration."""

from dataclasses import dataclass

from .errors import ConfigError

# U+FFFD REPLACEMENT CHARACTER encoded as UTF-8
REPLACEMENT_CHAR: bytes = "�".encode("utf-8")


@dataclass(frozen=True)
class ProcessorConfig:
    """
    Settings attached to a processor at construction.

    :param replacement: Byte sequence substituted for each maximal run of invalid
        UTF-8 when decoding. Empty selects raw-bytes mode.
    :param keep_unknown_bytes: Reserved, currently has no effect.
    :param pattern: Pre-tokenization regex; ``None`` disables pre-tokenization.
    """

    replacement: bytes = b""
    keep_unknown_bytes: bool = False
    pattern: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.replacement, (bytes, bytearray)):
            raise ConfigError(
                f"replacement must be bytes, got {type(self.replacement).__name__}"
            )
        # freeze bytearray input so the config stays hashable
        object.__setattr__(self, "replacement", bytes(self.replacement))

    @property
    def raw_bytes(self) -> bool:
        """Whether decode returns concatenated bytes without repair."""
        return not self.replacement
