"""
CLI entry point for ediroute.

Usage:
    ediroute encoding <input>          Print X12, EDIFACT or UNKNOWN
    ediroute type <input>              Print <version>/<message type>
    ediroute edi2json <input>          Transform an EDI document into JSON
    ediroute json2edi <input>          Transform a JSON document into EDI
    ediroute types                     List supported message types

<input> is a file path, or - to read from stdin.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ediroute import __version__
from ediroute.config import EdiRouteConfig
from ediroute.dispatcher import ConversionDispatcher
from ediroute.errors import UnsupportedKeyError
from ediroute.registry import REGISTRY


logger = logging.getLogger(__name__)

STDIN = "-"
OUTPUT_ENCODING = "utf-8"


def read_input(designator: str) -> bytes:
    """Read the whole input before the pipeline starts."""
    if designator == STDIN:
        return sys.stdin.buffer.read()
    return Path(designator).read_bytes()


def write_output(text: str) -> None:
    """Write command output as UTF-8 regardless of the terminal encoding."""
    stream = getattr(sys.stdout, "buffer", None)
    if stream is None:
        print(text)
        return
    sys.stdout.flush()
    stream.write((text + "\n").encode(OUTPUT_ENCODING))
    stream.flush()


def configure_logging(config: EdiRouteConfig, level: Optional[str] = None) -> None:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(config.log_format))
    package_logger = logging.getLogger("ediroute")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(level or config.log_level)


def cmd_convert(args) -> int:
    """Run one routing command and print its output."""
    try:
        data = read_input(args.input)
    except OSError as e:
        print(f"Cannot read {args.input}: {e}", file=sys.stderr)
        return 1
    logger.debug("read %d bytes from %s", len(data), args.input)

    dispatcher = ConversionDispatcher(json_indent=args.config.json_indent)
    result = dispatcher.run(args.command, data)

    if not result.success:
        message = str(result.error)
        if isinstance(result.error, UnsupportedKeyError):
            message = f"{message}. Run 'ediroute types' for the supported list."
        print(f"Error: {message}", file=sys.stderr)
        return 1

    write_output(result.output)
    return 0


def cmd_types(args) -> int:
    """List supported message types."""
    for key in REGISTRY.keys():
        capability = REGISTRY.lookup(key)
        print(f"{key.dialect}\t{key}\t{capability.description}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ediroute",
        description="EDI file processing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    ediroute encoding invoice.edi
    ediroute type invoice.edi
    ediroute edi2json invoice.edi > invoice.json
    cat invoice.json | ediroute json2edi -
"""
    )
    parser.add_argument('--version', action='version', version=f'ediroute {__version__}')
    parser.add_argument('--config', type=Path, help='Path to a YAML config file')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Override the configured log level')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    commands = [
        ('encoding', "Print 'X12' or 'EDIFACT' if the encoding can be determined, otherwise 'UNKNOWN'"),
        ('type', 'Print the X12 or EDIFACT message type as <version>/<type>'),
        ('edi2json', 'Transform an EDI document into a JSON document'),
        ('json2edi', 'Transform a JSON document into an EDI document'),
    ]
    for name, help_text in commands:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('input', help='Input file, - for <stdin>')
        sub.set_defaults(func=cmd_convert)

    types_p = subparsers.add_parser('types', help='List supported message types')
    types_p.set_defaults(func=cmd_types)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    args.config = EdiRouteConfig(args.config)
    configure_logging(args.config, args.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
