"""Benchmark encode() and decode_bytes() over a local text file.

Outputs a markdown table row with the columns:
  Corpus Size | Vocab Size | Load Time | Encoding Throughput |
  Decoding Throughput | Compression Ratio
"""

import argparse
import logging
import time
from pathlib import Path

import rankbpe


def load_corpus(path: Path, num_lines: int | None) -> list[str]:
    """Read up to `num_lines` non-empty lines; whole file when None."""
    print(f"Loading {path} …")
    lines = [line for line in path.read_text(encoding="utf-8").splitlines() if line]
    if num_lines is not None:
        return lines[:num_lines]
    return lines


def main() -> None:
    """Run the encode/decode benchmark and print a markdown row."""
    parser = argparse.ArgumentParser(
        description="Benchmark rankbpe encode() and decode_bytes()."
    )
    parser.add_argument("dictionary", type=Path, help="Path to a .tiktoken vocabulary.")
    parser.add_argument("corpus", type=Path, help="UTF-8 text file to encode.")
    parser.add_argument(
        "--num-lines",
        type=int,
        default=None,
        help="Number of lines to encode (default: whole file).",
    )
    pat_group = parser.add_mutually_exclusive_group()
    pat_group.add_argument(
        "--pattern",
        type=str,
        default=None,
        help="Built-in pattern name, e.g. cl100k (default: no pre-tokenization).",
    )
    pat_group.add_argument(
        "--regex",
        type=str,
        default=None,
        help="Raw pre-tokenization regex.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    pattern = rankbpe.get_pattern(args.pattern) if args.pattern else args.regex

    docs = load_corpus(args.corpus, args.num_lines)
    if not docs:
        raise RuntimeError("No lines loaded from corpus.")

    total_bytes = sum(len(d.encode("utf-8")) for d in docs)
    corpus_mb = total_bytes / (1024 * 1024)

    # --- Loading ---
    t0 = time.perf_counter()
    processor = rankbpe.get_processor(
        args.dictionary,
        replacement=rankbpe.REPLACEMENT_CHAR,
        pattern=pattern,
    )
    load_secs = time.perf_counter() - t0

    # --- Encoding ---
    t0 = time.perf_counter()
    encoded = [processor.encode(doc) for doc in docs]
    encode_elapsed = time.perf_counter() - t0
    encode_mbps = total_bytes / encode_elapsed / (1024 * 1024)

    # --- Decoding ---
    t0 = time.perf_counter()
    for ranks in encoded:
        processor.decode_bytes(ranks)
    decode_elapsed = time.perf_counter() - t0
    total_tokens = sum(len(seq) for seq in encoded)
    decode_mtps = total_tokens / decode_elapsed / 1_000_000

    compression_ratio = total_bytes / total_tokens if total_tokens else 0.0

    # --- Output ---
    print()
    header = (
        f"| {'Corpus Size':12} | {'Vocab Size':10} | {'Load Time':10} "
        f"| {'Encoding Throughput':19} | {'Decoding Throughput':19} "
        f"| {'Compression Ratio':17} |"
    )
    sep = (
        f"| {'-' * 12} | {'-' * 10} | {'-' * 10} "
        f"| {'-' * 19} | {'-' * 19} "
        f"| {'-' * 17} |"
    )
    row = (
        f"| {f'{corpus_mb:.2f} MB':12} | {processor.vocab_size():10,} "
        f"| {f'{load_secs:.2f} secs':10} "
        f"| {f'{encode_mbps:.2f} MB/sec':19} | {f'{decode_mtps:.1f}M tokens/sec':19} "
        f"| {f'{compression_ratio:.2f}x':17} |"
    )
    print(header)
    print(sep)
    print(row)
    print()


if __name__ == "__main__":
    main()
