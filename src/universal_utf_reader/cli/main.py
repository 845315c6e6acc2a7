"""Main CLI entry point for the universal-utf8 command-line tool.

Prints files as UTF-8 whatever their UTF encoding (``cat``) and reports how
each file's encoding would be resolved (``detect``).
"""

import argparse
import json
import logging
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from universal_utf_reader import __version__
from universal_utf_reader.api import detect_file_encoding, open_as_utf8
from universal_utf_reader.character import DecoderConfig, EncodingHint
from universal_utf_reader.shared.logging import get_logger
from universal_utf_reader.tools.memory import MemorySampler

HINT_CHOICES = [name.lower() for name in EncodingHint.__members__]

# Lines written between memory samples when --stats is on
SAMPLE_INTERVAL_LINES = 1024


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self, decoder_config: Optional[DecoderConfig] = None):
        self.decoder_config = decoder_config or DecoderConfig.html5()
        self.output_format = "text"
        self.verbose = False
        self.quiet = False

    @property
    def hint(self) -> EncodingHint:
        return self.decoder_config.hint

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Decoder keys (``hint``, ``buffer_size``, ``normalize_newlines``) go to
        the DecoderConfig; ``output_format`` is read from what is left over.
        Unreadable or invalid files leave the defaults in place.
        """
        config = cls()
        if not config_path.exists():
            return config
        try:
            decoder_config = DecoderConfig.from_file(config_path)
        except (OSError, ValueError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)
            return config

        config.decoder_config = decoder_config
        config.output_format = decoder_config.extra.get("output_format", config.output_format)
        return config


class FileDecoder:
    """Core decoding logic for CLI operations."""

    def __init__(self, config: CLIConfig, sampler: Optional[MemorySampler] = None):
        self.config = config
        self.sampler = sampler
        self.logger = get_logger(
            __name__, config.decoder_config.correlation_id, "cli_decoder"
        )

    def write_decoded(self, path: Path, output: BinaryIO) -> Dict[str, Any]:
        """Decode one file into ``output`` and return a summary.

        Errors opening or reading ``path`` are reported in the summary.
        Errors writing to ``output`` propagate to the caller.
        """
        decoder_config = self.config.decoder_config
        try:
            stream = open_as_utf8(path, config=decoder_config)
        except OSError as e:
            return self._failure(path, e)

        with stream:
            decoder = stream.raw
            line_number = 0
            while True:
                # Line reads keep each CRLF pair inside one chunk
                try:
                    line = stream.readline()
                except OSError as e:
                    return self._failure(path, e)
                if not line:
                    break

                line_number += 1
                if self.sampler and line_number % SAMPLE_INTERVAL_LINES == 0:
                    self.sampler.sample()
                if decoder_config.normalize_newlines and line.endswith(b"\r\n"):
                    line = line[:-2] + b"\n"
                output.write(line)

        result = decoder.encoding_result
        return {
            "file": str(path),
            "success": True,
            "encoding": result.encoding if result else None,
            "method": result.method.value if result else None,
            "metrics": decoder.metrics.as_dict(),
        }

    def _failure(self, path: Path, error: OSError) -> Dict[str, Any]:
        self.logger.error("Failed to decode file", extra={"file": str(path)})
        return {"file": str(path), "success": False, "error": str(error)}

    def detect(self, path: Path) -> Dict[str, Any]:
        """Report the encoding resolution for one file."""
        try:
            result = detect_file_encoding(path, self.config.hint)
        except OSError as e:
            return {"file": str(path), "success": False, "error": str(e)}

        return {
            "file": str(path),
            "success": True,
            "encoding": result.encoding,
            "method": result.method.value,
            "bom": result.bom.hex(" ") if result.bom else "",
        }


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="universal-utf8",
        description="Read UTF-8, UTF-16LE and UTF-16BE files as UTF-8"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Cat command
    cat_parser = subparsers.add_parser("cat", help="Print files as UTF-8")
    cat_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files to print"
    )
    cat_parser.add_argument(
        "--hint",
        choices=HINT_CHOICES,
        help="Encoding to assume when a file has no BOM (default: html5)"
    )
    cat_parser.add_argument(
        "--normalize-newlines", "-n",
        action="store_true",
        help="Convert CRLF line endings to LF"
    )
    cat_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    cat_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    cat_parser.add_argument(
        "--stats",
        action="store_true",
        help="Print decode metrics and memory usage as JSON to stderr"
    )

    # Detect command
    detect_parser = subparsers.add_parser(
        "detect", help="Show which encoding each file would be read with"
    )
    detect_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files to inspect"
    )
    detect_parser.add_argument(
        "--hint",
        choices=HINT_CHOICES,
        help="Encoding to assume when a file has no BOM (default: html5)"
    )
    detect_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        help="Output format (default: text)"
    )
    detect_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> CLIConfig:
    """Build the CLI configuration from an optional file plus flag overrides."""
    config = CLIConfig()
    if args.config:
        config = CLIConfig.from_file(args.config)

    if args.hint:
        config.decoder_config.hint = EncodingHint.from_name(args.hint)
    if getattr(args, "normalize_newlines", False):
        config.decoder_config.normalize_newlines = True
    if getattr(args, "format", None):
        config.output_format = args.format

    config.verbose = args.verbose
    config.quiet = args.quiet
    return config


def format_detections(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format detection results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    lines = []
    for result in results:
        if not result.get("success", False):
            lines.append(f"{result['file']}: error: {result.get('error', '')}")
            continue
        bom = f" [{result['bom']}]" if result.get("bom") else ""
        lines.append(f"{result['file']}: {result['encoding']} ({result['method']}){bom}")
    return "\n".join(lines)


def cmd_cat(args: argparse.Namespace) -> int:
    """Handle cat command."""
    config = load_config(args)
    sampler = MemorySampler() if args.stats else None
    decoder = FileDecoder(config, sampler)
    if sampler:
        sampler.sample()

    failures = 0
    results = []
    try:
        if args.output:
            output_context = args.output.open("wb")
        else:
            output_context = nullcontext(sys.stdout.buffer)
        with output_context as output:
            for path in args.paths:
                result = decoder.write_decoded(path, output)
                results.append(result)
                if not result["success"]:
                    failures += 1
                    if not config.quiet:
                        print(f"{path}: {result['error']}", file=sys.stderr)
            output.flush()
    except OSError as e:
        # Output is unusable, remaining files are skipped
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1

    if sampler:
        sampler.sample()
        summary = {"files": results, "memory": sampler.stats.to_dict()}
        print(json.dumps(summary, indent=2), file=sys.stderr)

    return 0 if failures == 0 else 1


def cmd_detect(args: argparse.Namespace) -> int:
    """Handle detect command."""
    config = load_config(args)
    decoder = FileDecoder(config)

    results = [decoder.detect(path) for path in args.paths]
    print(format_detections(results, config.output_format))

    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    # Route to appropriate command handler
    try:
        if args.command == "cat":
            return cmd_cat(args)
        elif args.command == "detect":
            return cmd_detect(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
