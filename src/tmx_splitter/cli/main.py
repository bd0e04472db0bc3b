"""
CLI Interface Module

Provides the command-line interface for the TMX Splitter: splitting a
document, inspecting its encoding and envelope, and validating a
configuration file.

This module is glue around the processing package. It parses arguments,
configures logging, drives a tqdm progress bar from the splitter's progress
callback, and prints a summary of the produced files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .. import __version__
from ..models.data_structures import SplitReport
from ..processing.encoding_detector import EncodingDetector
from ..processing.envelope_extractor import EnvelopeExtractor
from ..processing.stream_splitter import StreamSplitter
from ..utils.config_loader import Config, SplitterConfig
from ..utils.error_handlers import (
    STAGE_DETECTION,
    ConfigurationError,
    SplitIOError,
    TmxSplitError,
    ValidationError,
    create_error_report,
    log_error_with_context,
)
from ..utils.size_utils import format_size
from ..utils.validation_utils import validate_threshold, validate_tmx_file


logger = logging.getLogger(__name__)

# Constants
SEPARATOR_WIDTH = 60
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_VALIDATION = 2
EXIT_INTERRUPTED = 130


def setup_logging(log_level: str = "INFO", log_format: Optional[str] = None) -> None:
    """Configure logging for the CLI application.

    Sets up console logging with timestamp, logger name, level, and message
    format. Application output goes to stdout, logs go to stderr.

    Args:
        log_level: Logging level as string (DEBUG, INFO, WARNING, ERROR).
            Defaults to "INFO".
        log_format: Optional logging format string.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def load_config(args: argparse.Namespace) -> SplitterConfig:
    """Load configuration and apply command-line overrides.

    Raises:
        ConfigurationError: If the configuration file is invalid.
    """
    config = Config.load(getattr(args, "config", None))

    if getattr(args, "threshold", None):
        config.splitting["threshold"] = args.threshold
    if getattr(args, "output_dir", None):
        config.splitting["output_dir"] = str(args.output_dir)
    if getattr(args, "log_level", None):
        config.logging["level"] = args.log_level

    return config


def handle_error(context: str, error: Exception, args: argparse.Namespace) -> int:
    """Centralized error handling for commands.

    Args:
        context: Description of the operation that failed.
        error: Exception that was raised.
        args: Parsed arguments (used for the input path and error report path).

    Returns:
        Exit code: 2 for validation errors, 1 otherwise.
    """
    if isinstance(error, (TmxSplitError, ValueError)):
        log_error_with_context(
            error,
            logger,
            {
                "source_file": str(getattr(args, "input", "unknown")),
                "stage": context,
            },
        )
    else:
        logger.error(f"{context}: {error}", exc_info=True)

    report_path = getattr(args, "error_report", None)
    if report_path:
        partial = getattr(args, "_partial_report", None)
        report = create_error_report(error, split_report=partial)
        Path(report_path).write_text(json.dumps(report, indent=2, default=str))
        logger.info(f"Error report written to {report_path}")

    if isinstance(error, (ValidationError, ConfigurationError, ValueError)):
        return EXIT_VALIDATION
    return EXIT_ERROR


def command_split(args: argparse.Namespace) -> int:
    """Split a TMX document.

    Args:
        args: Parsed command-line arguments containing:
            - input: Path to the TMX document
            - threshold: Optional size shorthand (e.g. 100MB)
            - output_dir: Optional output directory
            - no_progress: Whether to hide the progress bar

    Returns:
        Exit code: 0 for success, non-zero for failure.
    """
    try:
        config = load_config(args)
        threshold = config.threshold_bytes
        validate_threshold(threshold)

        is_valid, message = validate_tmx_file(str(args.input))
        if not is_valid:
            raise SplitIOError(
                message, stage=STAGE_DETECTION, source_file=str(args.input)
            )

        logger.info(
            f"Splitting {args.input} at {format_size(threshold)} "
            f"({threshold} bytes)"
        )

        with tqdm(
            total=args.input.stat().st_size,
            unit="B",
            unit_scale=True,
            unit_divisor=1024,
            desc=args.input.name,
            disable=args.no_progress,
        ) as pbar:

            def on_progress(bytes_read: int, total_bytes: int) -> None:
                pbar.update(max(0, bytes_read - pbar.n))

            splitter = StreamSplitter(
                threshold_bytes=threshold,
                output_dir=config.splitting.get("output_dir"),
                record_marker=config.splitting["record_marker"],
                extractor=EnvelopeExtractor(
                    tail_block_size=config.tail_block_size,
                    max_head_size=config.max_head_size,
                    max_tail_size=config.max_tail_size,
                ),
                progress_callback=on_progress,
            )
            try:
                report = splitter.run(args.input)
            finally:
                args._partial_report = splitter.last_report

        print_split_summary(report)
        return EXIT_OK

    except (TmxSplitError, ValueError) as e:
        return handle_error("Split failed", e, args)


def command_inspect(args: argparse.Namespace) -> int:
    """Print the detected encoding and envelope of a TMX document.

    Returns:
        Exit code: 0 if both body markers were found, non-zero otherwise.
    """
    try:
        config = load_config(args)
        encoding = EncodingDetector().detect(str(args.input))
        envelope = EnvelopeExtractor(
            tail_block_size=config.tail_block_size,
            max_head_size=config.max_head_size,
            max_tail_size=config.max_tail_size,
        ).extract(str(args.input), encoding)

        print("\n" + "=" * SEPARATOR_WIDTH)
        print(f"Input: {args.input}")
        print(f"Size: {format_size(args.input.stat().st_size)}")
        print(f"Encoding: {encoding}")
        print(f"Head: {len(envelope.head)} characters")
        print(f"Tail: {len(envelope.tail)} characters")
        print("=" * SEPARATOR_WIDTH)
        if args.show_envelope:
            print(envelope.head)
            print("...")
            print(envelope.tail)
        return EXIT_OK

    except (TmxSplitError, ValueError) as e:
        return handle_error("Inspection failed", e, args)


def command_validate_config(args: argparse.Namespace) -> int:
    """Validate a configuration file.

    Returns:
        Exit code: 0 if the configuration is valid, 2 otherwise.
    """
    logger.info(f"Validating configuration: {args.config or '(defaults)'}")

    try:
        config = Config.load(args.config)
    except ConfigurationError as e:
        return handle_error("Configuration validation failed", e, args)

    errors = Config.validate(config)
    if errors:
        for error in errors:
            print(f"✗ {error}")
        return EXIT_VALIDATION

    print("✓ Configuration is valid")
    return EXIT_OK


def print_split_summary(report: SplitReport) -> None:
    """Print formatted summary of a split run.

    Args:
        report: Report returned by the splitter.
    """
    print("\n" + "=" * SEPARATOR_WIDTH)
    print("SPLIT SUMMARY")
    print("=" * SEPARATOR_WIDTH)
    print(f"Input: {report.input_path}")
    print(f"Encoding: {report.encoding}")
    print(f"Threshold: {format_size(report.threshold_bytes)}")
    print(f"Files: {report.file_count}")
    print(f"Records: {report.total_records}")
    print(f"Output: {format_size(report.total_output_bytes)}")
    for info in report.files:
        print(
            f"  [{info.sequence}] {info.path.name}  "
            f"{format_size(info.size_bytes)}  {info.record_count} record(s)"
        )
    print(f"Elapsed: {report.elapsed_seconds:.2f}s")
    print("=" * SEPARATOR_WIDTH + "\n")


def setup_argument_parser() -> argparse.ArgumentParser:
    """Configure the argument parser with all CLI commands and options.

    Creates a parser with subcommands for:
    - split: Split a TMX document
    - inspect: Show encoding and envelope of a TMX document
    - validate-config: Validate a configuration file

    Returns:
        Configured ArgumentParser instance ready to parse sys.argv.
    """
    parser = argparse.ArgumentParser(
        prog="tmx-split",
        description="TMX Splitter - split large translation memories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Split into files of roughly 100 MB
  %(prog)s split memory.tmx --threshold 100MB

  # Write the parts to another directory
  %(prog)s split memory.tmx --threshold 2GB --output-dir ./parts

  # Show encoding and envelope
  %(prog)s inspect memory.tmx
        """,
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML configuration file (default: built-in settings)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: from configuration, INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Split command
    split_parser = subparsers.add_parser(
        "split",
        help="Split a TMX document",
        description="Split a TMX document into self-contained parts.",
    )
    split_parser.add_argument(
        "input",
        type=Path,
        help="Path to TMX file",
    )
    split_parser.add_argument(
        "--threshold",
        help="Size after which a part is closed at the next record, "
        "e.g. 65536, 64KB, 100MB, 2GB (minimum 64KB)",
    )
    split_parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the parts (default: next to the input)",
    )
    split_parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    split_parser.add_argument(
        "--error-report",
        help="Write a JSON error report to this path on failure",
    )

    # Inspect command
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Show encoding and envelope",
        description="Detect the encoding and extract the envelope of a TMX file.",
    )
    inspect_parser.add_argument(
        "input",
        type=Path,
        help="Path to TMX file",
    )
    inspect_parser.add_argument(
        "--show-envelope",
        action="store_true",
        help="Print the head and tail text",
    )

    # Validate config command
    subparsers.add_parser(
        "validate-config",
        help="Validate configuration",
        description="Validate a splitter configuration file.",
    )

    return parser


def main(argv: Optional[list] = None) -> int:
    """Execute the main CLI entry point.

    Parses command-line arguments, configures logging, and routes to the
    appropriate command handler.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).

    Returns:
        Exit code: 0 for success, non-zero for errors.

    Example:
        $ tmx-split split memory.tmx --threshold 100MB
    """
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"TMX Splitter v{__version__}")
        return EXIT_OK

    try:
        config = Config.load(args.config)
    except ConfigurationError as e:
        setup_logging("INFO")
        logger.error(str(e))
        return EXIT_VALIDATION

    setup_logging(
        args.log_level or str(config.logging.get("level", "INFO")),
        config.logging.get("format"),
    )

    if args.command is None:
        parser.print_help()
        return EXIT_ERROR

    command_map = {
        "split": command_split,
        "inspect": command_inspect,
        "validate-config": command_validate_config,
    }

    try:
        return command_map[args.command](args)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
