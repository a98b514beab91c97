#!/usr/bin/env python3
"""Rank the images of a directory by perceptual distance to a reference image.

Usage example:
  python puzzle_diff_cli.py -o ranking.txt ./reference.jpg ./images
"""
import argparse
import logging
import os
import sys
from pathlib import Path

EXIT_OK = 0
EXIT_REFERENCE_ERROR = 1
EXIT_DIRECTORY_ERROR = 3

DEFAULT_THRESHOLD = "0.12"
DEFAULT_TOPK = "10"
DEFAULT_WORKERS = "0"


def _worker_count(value):
    # 0 leaves the pool size to the executor
    return int(value) or None


def parse_args(argv=None):
    # string defaults go through type=, so a bad environment value is a usage error
    env = os.environ
    p = argparse.ArgumentParser(prog="puzzle-diff", description="Find near-duplicate and similar images")
    p.add_argument("reference", help="Reference image")
    p.add_argument("directory", help="Directory of candidate images")
    p.add_argument("-o", "--output", default=None, help="Also write the ranking to this file")
    p.add_argument("--csv", default=None, help="Write a CSV report to this path")
    p.add_argument("-t", "--threshold", type=float, default=env.get("PUZZLE_DIFF_THRESHOLD", DEFAULT_THRESHOLD),
                   help="Distance at or below which images count as identical")
    p.add_argument("-k", "--topk", type=int, default=env.get("PUZZLE_DIFF_TOPK", DEFAULT_TOPK),
                   help="Entries kept per ranked list")
    p.add_argument("--no-text-fix", action="store_true", help="Disable the text-fix distance mode")
    p.add_argument("--workers", type=_worker_count, default=env.get("PUZZLE_DIFF_WORKERS", DEFAULT_WORKERS),
                   help="Concurrent image loads")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    from puzzle_diff import pipeline, report
    from puzzle_diff.features import FingerprintError

    try:
        config = pipeline.RankConfig(
            threshold=args.threshold,
            capacity=args.topk,
            fix_for_texts=not args.no_text_fix,
            workers=args.workers,
        )
    except ValueError as e:
        print(f"puzzle-diff: error: {e}", file=sys.stderr)
        return 2

    try:
        result = pipeline.rank_directory(Path(args.reference), Path(args.directory), config)
    except FingerprintError:
        print(f"Unable to read reference image: [{args.reference}]", file=sys.stderr)
        return EXIT_REFERENCE_ERROR
    except OSError as e:
        print(f"Unable to list search directory [{args.directory}]: {e}", file=sys.stderr)
        return EXIT_DIRECTORY_ERROR

    with report.Reporter(args.output) as reporter:
        pipeline.report_result(result, reporter)

    if args.csv:
        try:
            report.write_csv(result.identical, result.similar, Path(args.csv))
        except OSError as e:
            logging.getLogger(__name__).warning("Cannot write CSV report %s: %s", args.csv, e)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
