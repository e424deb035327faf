#!/usr/bin/env python3
"""
hashcollide CLI — Command line interface for hash collision detection.
Runs the same detection pipeline as library callers, with console or JSON output.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import json
import logging
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, NoReturn

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from hashcollide.core.models import DetectionParams, DetectionResult, DetectionStats
from hashcollide.core.errors import DetectionTimeoutError, ParameterShapeError
from hashcollide.commands import DetectionCommand
from hashcollide.samples import SAMPLE_MESSAGE_1, SAMPLE_MESSAGE_2
from hashcollide.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    EXIT_OK, EXIT_ERROR, EXIT_COLLISION,
    EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.as_json: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="hashcollide",
            description="hashcollide — check whether two hex messages are a hash collision pair",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "messages",
            nargs="*",
            metavar="MESSAGE",
            help="Two messages in hex format (whitespace is ignored)"
        )
        parser.add_argument(
            "--sample",
            action="store_true",
            help="Use the built-in published MD5 collision pair instead of MESSAGE arguments"
        )

        # Digest options
        parser.add_argument(
            "--algorithm", "-a",
            choices=ALGORITHM_CHOICES,
            default="md5",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--parallel",
            action="store_true",
            help="Compute the two digests on separate threads"
        )

        # Classifier options
        parser.add_argument(
            "--weights", "-w",
            default=None,
            type=str,
            metavar='PATH',
            help="Classifier parameters (.npz with W1 b1 W2 b2 W3 b3)"
        )
        parser.add_argument(
            "--seed", "-s",
            default=None,
            type=int,
            metavar='N',
            help="Seed for random (untrained) classifier parameters. Default: 0"
        )
        parser.add_argument(
            "--save-weights",
            default=None,
            type=str,
            metavar='PATH',
            dest="save_weights",
            help="Write the classifier parameters that were used to a .npz file"
        )

        # Execution options
        parser.add_argument(
            "--timeout", "-t",
            default=None,
            type=float,
            metavar='SECONDS',
            help="Give up if detection takes longer than this"
        )

        # Output options
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the result as JSON"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress output; only the exit code reports the verdict"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics, progress and debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.sample and args.messages:
            self.error_exit("--sample cannot be combined with MESSAGE arguments")

        if not args.sample and len(args.messages) != 2:
            self.error_exit(f"Expected exactly two messages, got {len(args.messages)}")

        if args.weights and args.seed is not None:
            self.error_exit("--weights and --seed cannot be used together")

        if args.weights:
            weights_path = Path(args.weights)
            if not weights_path.exists():
                self.error_exit(f"Weights file not found: {args.weights}")
            if not weights_path.is_file():
                self.error_exit(f"Weights path is not a file: {args.weights}")

        if args.seed is not None and args.seed < 0:
            self.error_exit("Seed cannot be negative")

        if args.timeout is not None and args.timeout <= 0:
            self.error_exit("Timeout must be a positive number of seconds")

        if args.quiet and args.verbose:
            self.warning("--quiet overrides --verbose")

    def create_params(self, args: argparse.Namespace) -> DetectionParams:
        """Create DetectionParams from CLI arguments."""
        if args.sample:
            message1, message2 = SAMPLE_MESSAGE_1, SAMPLE_MESSAGE_2
        else:
            message1, message2 = args.messages

        try:
            return DetectionParams.from_cli_values(
                message1=message1,
                message2=message2,
                algorithm=ALGORITHM_ALIASES.get(args.algorithm, "md5"),
                weights_path=args.weights,
                seed=args.seed,
                timeout=args.timeout,
                parallel_digests=args.parallel,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)\n")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} stages done...\n")
        sys.stderr.flush()

    def run_detection(self, command: DetectionCommand, params: DetectionParams) -> DetectionResult:
        """Execute the detection workflow."""
        if self.verbose:
            print(f"Checking messages (algorithm: {params.algorithm})...")

        try:
            result, stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except DetectionTimeoutError as e:
            self.error_exit(str(e))
        except ParameterShapeError as e:
            self.error_exit(f"Invalid classifier parameters: {e}")
        except OSError as e:
            self.error_exit(f"Cannot read classifier parameters: {e}")

        if self.verbose:
            self.print_stats(stats)
        return result

    @staticmethod
    def print_stats(stats: DetectionStats) -> None:
        print("\nDetection Statistics:")
        print(stats.print_summary())

    def output_results(self, result: DetectionResult, params: DetectionParams) -> None:
        """Print the verdict (or the error) as plain text or JSON."""
        if self.quiet:
            return

        if self.as_json:
            print(json.dumps(result.to_dict(), indent=2))
            if not result.ok:
                print(f"❌ Error: {result.message}", file=sys.stderr)
            return

        if not result.ok:
            print(f"❌ Error: {result.message}", file=sys.stderr)
            return

        verdict = result.verdict
        label = params.algorithm.upper()
        print(f"Message 1 {label}: {verdict.digest1.hex}")
        print(f"Message 2 {label}: {verdict.digest2.hex}")
        print(f"Classifier score: {verdict.probability:.4f}")
        print()
        if verdict.is_collision:
            print(f"⚠️  Hash collision detected! Both messages produce the same {label} hash "
                  f"but have different content.")
        else:
            print("✅ No collision detected - messages are safe.")

    @staticmethod
    def exit_code_for(result: DetectionResult) -> int:
        if not result.ok:
            return EXIT_ERROR
        return EXIT_COLLISION if result.verdict.is_collision else EXIT_OK

    def save_weights(self, command: DetectionCommand, params: DetectionParams, path: str) -> None:
        try:
            written = command.load_parameters(params).save(path)
        except OSError as e:
            self.error_exit(f"Cannot write classifier parameters: {e}")
        if self.verbose:
            print(f"Classifier parameters written to {written}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = EXIT_ERROR) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point. Returns the process exit code."""
        args = self.parse_args(argv)
        self.quiet = args.quiet
        self.verbose = args.verbose and not args.quiet
        self.as_json = args.json

        if self.verbose:
            logging.getLogger("hashcollide").setLevel(logging.DEBUG)

        self.validate_args(args)
        params = self.create_params(args)

        with DetectionCommand() as command:
            result = self.run_detection(command, params)
            if args.save_weights:
                self.save_weights(command, params, args.save_weights)

        self.output_results(result, params)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.3f} seconds")

        return self.exit_code_for(result)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        sys.exit(app.run())
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()
