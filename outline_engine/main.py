#!/usr/bin/env python3
"""
Command-line entry point: turn a directory of PDFs into JSON outlines.

    outline-engine --input ./pdfs --output ./outlines [--workers N] [--log-level LEVEL]

Exits with status 1 when the input directory is unusable, when the run is
interrupted, or when not a single file could be written.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .batch_processor import BatchProcessor
from .config import LOG_LEVEL, MAX_WORKERS
from .logging_config import setup_logging

logger = setup_logging()

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse the command line (``sys.argv[1:]`` when ``argv`` is None)."""
    parser = argparse.ArgumentParser(
        prog='outline-engine',
        description='Infer the title and H1-H3 outline of every PDF in a directory',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  outline-engine -i ./pdfs -o ./outlines
  outline-engine -i ./pdfs -o ./outlines --workers 4 --log-level debug
        """
    )
    parser.add_argument('--input', '-i', required=True,
                        help='directory containing the PDF files')
    parser.add_argument('--output', '-o', required=True,
                        help='directory receiving one <name>.json per PDF')
    parser.add_argument('--workers', '-w', type=int, default=MAX_WORKERS,
                        help='documents processed in parallel (default: %(default)s)')
    parser.add_argument('--log-level', type=str.upper, default=LOG_LEVEL.upper(), choices=LOG_LEVELS,
                        help='logging verbosity (default: %(default)s)')
    return parser.parse_args(argv)


def validate_input_directory(input_path: str) -> Path:
    """
    Resolve the input directory, exiting with status 1 if it is unusable.
    """
    input_dir = Path(input_path)
    if not input_dir.is_dir():
        reason = "is not a directory" if input_dir.exists() else "does not exist"
        logger.error(f"Input path {reason}: {input_path}")
        sys.exit(1)
    return input_dir


def report_outcome(stats: Dict[str, Any]) -> int:
    """Log the verdict of a batch run and return the process exit status."""
    total, written, failed = stats['total_files'], stats['successful'], stats['failed']

    if total and not written:
        logger.error(f"None of the {total} PDF files could be processed")
        return 1
    if failed:
        logger.warning(f"{failed} of {total} PDF files failed")
    elif total:
        logger.info(f"All {total} PDF files processed")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_arguments(argv)
    setup_logging(args.log_level)

    input_dir = validate_input_directory(args.input)
    logger.info(f"Reading PDFs from {input_dir}, writing outlines to {args.output}")

    try:
        stats = BatchProcessor(max_workers=args.workers).process_directory(str(input_dir), args.output)
    except KeyboardInterrupt:
        logger.info("Processing interrupted by user")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Batch aborted: {e}")
        sys.exit(1)

    exit_code = report_outcome(stats)
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
