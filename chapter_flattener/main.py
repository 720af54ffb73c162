#!/usr/bin/env python3
"""
Command-line interface for the Chapter Flattener.

This module provides the CLI entry point for rewriting nested audiobook
chapter files (``*-chapters.json``) in the current directory into flat
chapter lists, and for restoring them from their ``.bak`` backups.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add parent directory to path for imports when running as script
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent.parent))

from chapter_flattener.config import Config, ConfigurationError, FLATTEN, REVERT
from chapter_flattener.file_manager import ChapterFileManager, BatchResult


HELP_FLAGS = ("-h", "--help")


def wants_help(argv: List[str]) -> bool:
    """Return True if a help flag appears anywhere on the command line."""
    return any(arg in HELP_FLAGS for arg in argv)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="flatten-chapters",
        description="Flatten nested chapter trees in *-chapters.json files in the current directory.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
        epilog="""
Examples:
  %(prog)s              flatten every *-chapters.json, keeping a .bak copy
  %(prog)s --no-backup  flatten without writing .bak copies
  %(prog)s --revert     restore every file from its .bak copy and delete it

Configuration:
  CHAPTERS_DIR     directory to process (default: current directory)
  CHAPTERS_BACKUP  write .bak copies when flattening (default: true)
  Both may be set in the environment or in a .env file.
        """
    )

    parser.add_argument(
        "-h", "--help",
        dest="help",
        action="store_true",
        help="Show this help message and exit"
    )

    parser.add_argument(
        "--no-backup",
        dest="no_backup",
        action="store_true",
        help="Do not create .bak copies before flattening"
    )

    parser.add_argument(
        "--revert",
        dest="revert",
        action="store_true",
        help="Restore every chapters file from its .bak copy and delete the copy"
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        default=".env",
        help="Path to .env file (default: .env)"
    )

    return parser


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Override loaded configuration with command-line flags.

    ``--revert`` wins over ``--no-backup``, which only matters when
    flattening. Help is handled before configuration is loaded.
    """
    if args.revert:
        config.mode = REVERT
    else:
        config.mode = FLATTEN

    if args.no_backup:
        config.backup_enabled = False

    return config


def format_result(result: BatchResult) -> str:
    """Format a batch result for display to the user.

    Args:
        result: The batch result to format

    Returns:
        Formatted string for display
    """
    lines = []
    verb = "Flattened" if result.operation == FLATTEN else "Restored"

    if result.success:
        lines.append(f"✓ {verb} {len(result.processed)} file(s)")
    else:
        lines.append(f"✗ {verb} {len(result.processed)} of {result.total} file(s)")
        lines.append("")
        lines.append("Failed:")
        for path in result.failed:
            lines.append(f"  {path}")

    if result.skipped_backups:
        lines.append("")
        lines.append("Existing backups kept (not overwritten, may be older than the rewritten file):")
        for path in result.skipped_backups:
            lines.append(f"  {path}")

    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (default: sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]

    # Help wins over every other flag, including malformed ones
    if wants_help(argv):
        parser.print_help()
        return 0

    args, unknown = parser.parse_known_args(argv)

    if unknown:
        print(f"Error: unrecognized arguments: {' '.join(unknown)}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    try:
        try:
            config = apply_args(Config.load(env_file=args.env_file), args)
        except ConfigurationError as e:
            print(str(e), file=sys.stderr)
            return 1

        manager = ChapterFileManager(config)
        if config.mode == REVERT:
            result = manager.revert_all()
        else:
            result = manager.flatten_all()

        if result.total:
            print("")
            print(format_result(result))

        return 0 if result.success else 1

    except KeyboardInterrupt:
        print("\n\nProcessing interrupted by user", file=sys.stderr)
        return 1

    except Exception as e:
        print(f"\nUnexpected error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
