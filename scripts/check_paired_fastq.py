#!/usr/bin/env python3

"""
Paired FASTQ validation script
Re-reads a generated R1/R2 pair and checks that every mate is the reverse complement of its read
"""

import argparse
import re
from itertools import zip_longest
from pathlib import Path

import pysam

from generate_paired_reads import (
    BASES,
    MAX_QUAL,
    MIN_QUAL,
    PHRED_OFFSET,
    print_error,
    report_issues,
    reverse_complement,
)

HEADER_PATTERN = re.compile(r"^read_(\d+)/([12])$")


def iter_fastq(path):
    """Yield (name, sequence, quality) for each record in a FASTQ file"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"FASTQ file not found: {path}")

    # A zero-record FASTQ is an empty file
    if path.stat().st_size == 0:
        return

    with pysam.FastxFile(str(path)) as fh:
        for entry in fh:
            yield entry.name, entry.sequence, entry.quality


def read_fastq(path):
    """Return (name, sequence, quality) tuples for every record in a FASTQ file"""
    return list(iter_fastq(path))


def check_record(name, sequence, quality, mate, read_length=None):
    """Return the issues found in a single record"""
    issues = []

    # pysam reports an empty line as None
    sequence = sequence or ""
    if quality is None and not sequence:
        quality = ""

    match = HEADER_PATTERN.match(name or "")
    if not match:
        issues.append(f"Malformed header: {name}")
    elif int(match.group(2)) != mate:
        issues.append(f"{name}: expected mate {mate}")

    bad_bases = sorted(set(sequence) - set(BASES))
    if bad_bases:
        issues.append(f"{name}: invalid bases {', '.join(bad_bases)}")

    if quality is None or len(quality) != len(sequence):
        issues.append(f"{name}: sequence and quality lengths differ")
    else:
        low, high = PHRED_OFFSET + MIN_QUAL, PHRED_OFFSET + MAX_QUAL
        if any(not low <= ord(q) <= high for q in quality):
            issues.append(f"{name}: quality outside ASCII {low}-{high}")

    if read_length is not None and len(sequence) != read_length:
        issues.append(f"{name}: length {len(sequence)} != {read_length}")

    return issues


def check_paired_fastq(read1_path, read2_path, read_length=None):
    """
    Check an R1/R2 pair produced by generate_paired_reads.py.

    Both files must hold the same number of records, in the same order:

    R1: @read_1/1  ACGTT  +  <qual>
    R2: @read_1/2  AACGT  +  <qual>

    Returns a list of issues, empty when the pair is valid.
    """
    issues = []
    count1 = count2 = 0

    pairs = zip_longest(iter_fastq(read1_path), iter_fastq(read2_path))
    for i, (rec1, rec2) in enumerate(pairs, 1):
        if rec1 is not None:
            count1 += 1
        if rec2 is not None:
            count2 += 1
        if rec1 is None or rec2 is None:
            continue

        name1, seq1, qual1 = rec1
        name2, seq2, qual2 = rec2
        seq1, seq2 = seq1 or "", seq2 or ""

        issues.extend(f"Record {i}: {issue}" for issue in check_record(name1, seq1, qual1, 1, read_length))
        issues.extend(f"Record {i}: {issue}" for issue in check_record(name2, seq2, qual2, 2, read_length))

        id1 = name1.rsplit("/", 1)[0]
        id2 = name2.rsplit("/", 1)[0]
        if id1 != id2:
            issues.append(f"Record {i}: read names differ: {name1} / {name2}")

        try:
            if seq2 != reverse_complement(seq1):
                issues.append(f"Record {i}: R2 is not the reverse complement of R1")
        except ValueError:
            # invalid bases already reported above
            pass

    if count1 != count2:
        issues.insert(0, f"Record counts differ: R1 has {count1}, R2 has {count2}")

    return issues


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Validate a synthetic paired-end FASTQ pair",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python check_paired_fastq.py synthetic_reads_R1.fastq synthetic_reads_R2.fastq
    python check_paired_fastq.py tiny_R1.fastq tiny_R2.fastq -l 75
""",
    )
    parser.add_argument("read1", metavar="READ1", help="R1 FASTQ file")
    parser.add_argument("read2", metavar="READ2", help="R2 FASTQ file")
    parser.add_argument("-l", "--read-length", type=int, help="Expected read length (optional)")

    args = parser.parse_args(argv)

    try:
        issues = check_paired_fastq(args.read1, args.read2, args.read_length)
    except (OSError, ValueError) as e:
        print_error(f"Cannot read FASTQ pair: {e}")

    if issues:
        report_issues(issues)

    print(f"FASTQ pair is valid: {args.read1} + {args.read2}")


if __name__ == "__main__":
    main()
