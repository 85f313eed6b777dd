#!/usr/bin/env python3

"""
Generate synthetic paired-end FASTQ files for testing
Writes random reads to <prefix>_R1.fastq and their reverse complements to <prefix>_R2.fastq
"""

from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

__version__ = "0.1.0"

DEFAULT_OUTFILE = "synthetic_reads"
DEFAULT_NUM_READS = 1000
DEFAULT_READ_LENGTH = 150

BASES = "ATCG"
COMPLEMENT = {"A": "T", "T": "A", "C": "G", "G": "C"}

# Phred+33: chr(33+0) = '!', chr(33+40) = 'I'
PHRED_OFFSET = 33
MIN_QUAL = 0
MAX_QUAL = 40


@dataclass
class ReadPair:
    index: int
    read1: str
    read2: str
    qual1: str
    qual2: str


def generate_sequence(length: int, rng: random.Random) -> str:
    """Return ``length`` bases drawn uniformly from A, T, C, G"""
    return "".join(rng.choice(BASES) for _ in range(length))


def complement(base: str) -> str:
    try:
        return COMPLEMENT[base]
    except KeyError:
        raise ValueError(f"Invalid nucleotide: {base!r}") from None


def reverse_complement(seq: str) -> str:
    """Return reverse complement of DNA sequence"""
    return "".join(complement(base) for base in reversed(seq))


def generate_quality(
    length: int, rng: random.Random, min_qual: int = MIN_QUAL, max_qual: int = MAX_QUAL
) -> str:
    """Generate random quality scores in FASTQ format"""
    return "".join(chr(PHRED_OFFSET + rng.randint(min_qual, max_qual)) for _ in range(length))


def format_record(read_id: int, mate: int, sequence: str, quality: str) -> str:
    """
    Format one FASTQ record:

    @read_<id>/<mate>
    <sequence>
    +
    <quality>
    """
    if mate not in (1, 2):
        raise ValueError(f"Mate must be 1 or 2, got {mate}")
    if len(sequence) != len(quality):
        raise ValueError(
            f"Sequence and quality lengths differ for read_{read_id}/{mate}: "
            f"{len(sequence)} != {len(quality)}"
        )
    return f"@read_{read_id}/{mate}\n{sequence}\n+\n{quality}\n"


def generate_read_pair(index: int, read_length: int, rng: random.Random) -> ReadPair:
    """Generate a read and its reverse-complement mate, each with its own qualities"""
    read1 = generate_sequence(read_length, rng)
    return ReadPair(
        index=index,
        read1=read1,
        read2=reverse_complement(read1),
        qual1=generate_quality(read_length, rng),
        qual2=generate_quality(read_length, rng),
    )


def fastq_paths(prefix) -> Tuple[Path, Path]:
    prefix = str(prefix)
    return Path(f"{prefix}_R1.fastq"), Path(f"{prefix}_R2.fastq")


def generate_fastq_files(
    prefix,
    num_reads: int = DEFAULT_NUM_READS,
    read_length: int = DEFAULT_READ_LENGTH,
    rng: Optional[random.Random] = None,
) -> Tuple[Path, Path]:
    """Generate paired FASTQ files and return their paths"""

    if num_reads < 0:
        raise ValueError(f"Number of reads must not be negative: {num_reads}")
    if read_length < 0:
        raise ValueError(f"Read length must not be negative: {read_length}")

    if rng is None:
        rng = random.Random()

    read1_file, read2_file = fastq_paths(prefix)
    read1_file.parent.mkdir(parents=True, exist_ok=True)

    f1 = open(read1_file, "w")
    try:
        f2 = open(read2_file, "w")
    except OSError:
        # Don't leave a lone R1 behind
        f1.close()
        read1_file.unlink()
        raise

    with f1, f2:
        for i in range(1, num_reads + 1):
            pair = generate_read_pair(i, read_length, rng)
            f1.write(format_record(pair.index, 1, pair.read1, pair.qual1))
            f2.write(format_record(pair.index, 2, pair.read2, pair.qual2))

    return read1_file, read2_file


def positive_int(value):
    """argparse type for counts and lengths that must be >= 1"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def print_error(message, label="", value=""):
    """Print error message and exit"""
    print(f"ERROR: {message}", file=sys.stderr)
    if label and value:
        print(f"{label}: {value}", file=sys.stderr)
    sys.exit(1)


def report_issues(issues, limit=20):
    """Print validation issues and exit"""
    print("Validation issues found:", file=sys.stderr)
    for issue in issues[:limit]:
        print(f"  - {issue}", file=sys.stderr)
    if len(issues) > limit:
        print(f"  ... and {len(issues) - limit} more", file=sys.stderr)
    sys.exit(1)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="A simple tool to generate random paired-end FASTQ files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 1000 pairs of 150 bp reads -> synthetic_reads_R1.fastq / synthetic_reads_R2.fastq
  python generate_paired_reads.py

  # Small smoke-test data, checked after writing
  python generate_paired_reads.py -o tests/smoke/tiny -n 50 -l 75 --validate
""",
    )
    parser.add_argument(
        "-o",
        "--outfile",
        default=DEFAULT_OUTFILE,
        help=f"Output filename prefix (default: {DEFAULT_OUTFILE})",
    )
    parser.add_argument(
        "-n",
        type=positive_int,
        default=DEFAULT_NUM_READS,
        metavar="NUMBER",
        help=f"Number of read pairs to generate (default: {DEFAULT_NUM_READS})",
    )
    parser.add_argument(
        "-l",
        type=positive_int,
        default=DEFAULT_READ_LENGTH,
        metavar="LENGTH",
        help=f"Read length in bases (default: {DEFAULT_READ_LENGTH})",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Re-read the generated files and check read pairing",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    print(f"Starting generation of {args.n} paired reads (Length: {args.l})")

    try:
        read1_file, read2_file = generate_fastq_files(args.outfile, args.n, args.l)
    except OSError as e:
        print_error(f"Cannot write FASTQ output: {e}", "Prefix", args.outfile)

    print(f"Generated {args.n} read pairs of length {args.l}:")
    print(f"  - {read1_file}")
    print(f"  - {read2_file}")

    if args.validate:
        # check_paired_fastq imports from this module
        from check_paired_fastq import check_paired_fastq

        print("\nValidating output...")
        try:
            issues = check_paired_fastq(read1_file, read2_file, read_length=args.l)
        except (OSError, ValueError) as e:
            print_error(f"Cannot read FASTQ pair: {e}", "Prefix", args.outfile)
        if issues:
            report_issues(issues)
        print("Validation passed!")


if __name__ == "__main__":
    main()
