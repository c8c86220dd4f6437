#!/usr/bin/env python3
"""
Command-Line Interface for qrbase

Usage:
    qrbase --encode 48656c6c6f                # Byte-pair encode hex input
    qrbase --encode-text "Hello"              # Byte-pair encode text
    qrbase --decode 01AL0FP2                  # Decode to hex
    qrbase --decode -- -A0                    # Value starting with "-"
    qrbase --decode=-A0                       # Same
    qrbase --encode 0102 --bits 12            # Fixed-bit-width encode
    qrbase --compare ffffffffffffffffffffffffffffffff
    qrbase --api                              # Run REST API server
    python -m qrbase -a 44 --encode ff        # Same, base44 alphabet

Exit Codes:
    0: Success
    1: Config file error
    2: Usage error or malformed input (bad hex, bit count out of range)
    3: Decode error (invalid character, dangling group, overflow)
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .codec import MAX_BITS, Codec, get_codec
from .config import DEFAULT_CONFIG_PATH, SUPPORTED_ALPHABETS, CodecConfig, setup_logging
from .errors import CodecError


EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_BAD_INPUT = 2
EXIT_DECODE_ERROR = 3

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="qrbase",
        description="QR-compatible base43/base44 encoder and decoder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  qrbase --encode 48656c6c6f                # Encode hex bytes
  qrbase --encode-text "Hello"              # Encode UTF-8 text
  qrbase --decode 01AL0FP2 --as-text        # Decode and print as text
  qrbase --decode -- -A0                    # Value starting with "-"
  qrbase -a 44 --encode 00 --bits 103       # Fixed 103-bit width, base44
  qrbase --compare ffff                     # Compare encoded lengths
  qrbase --api --api-port 8000              # Run REST API server
        """
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "-a", "--alphabet",
        type=int,
        choices=SUPPORTED_ALPHABETS,
        default=None,
        help="Alphabet size (default: from config or 43)",
    )
    parser.add_argument(
        "-b", "--bits",
        type=int,
        default=None,
        help=f"Use the fixed-bit-width codec with this many bits (1-{MAX_BITS})",
    )
    parser.add_argument(
        "--as-text",
        action="store_true",
        help="Print decoded bytes as text instead of hex",
    )

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--encode", metavar="HEX", help="Encode hex bytes")
    actions.add_argument(
        "--encode-text",
        nargs="?",
        const=True,
        metavar="TEXT",
        help="Encode text bytes (TEXT may follow -- instead)",
    )
    actions.add_argument(
        "--decode",
        nargs="?",
        const=True,
        metavar="STRING",
        help="Decode an encoded string (STRING may follow -- instead)",
    )
    actions.add_argument(
        "--compare",
        metavar="HEX",
        help="Show byte-pair and fixed-bit-width encodings of the same bytes",
    )
    actions.add_argument(
        "--alphabets",
        action="store_true",
        help="Show both alphabet tables and exit",
    )
    actions.add_argument(
        "--api",
        action="store_true",
        help="Run the REST API server",
    )

    parser.add_argument(
        "--api-host",
        default=None,
        help="API server host (default: from config or 0.0.0.0)",
    )
    parser.add_argument(
        "--api-port",
        type=int,
        default=None,
        help="API server port (default: from config or 8080)",
    )
    parser.add_argument(
        "value",
        nargs="?",
        default=None,
        metavar="VALUE",
        help="Value for --decode or --encode-text, after --",
    )
    return parser


def _resolve_value(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    """
    Move a value given after -- into --decode or --encode-text.

    Encoded strings may start with "-" (digit 39), which argparse would
    otherwise read as an option.
    """
    for name in ("decode", "encode_text"):
        if getattr(args, name) is True:
            if args.value is None:
                parser.error(f"--{name.replace('_', '-')} expects a value")
            setattr(args, name, args.value)
            return
    if args.value is not None:
        parser.error(f"unexpected argument: {args.value}")


def load_config(path: Optional[str]) -> CodecConfig:
    """
    Load the config file.

    An explicitly named file must exist; the default file is optional.
    """
    if path is None:
        if not os.path.exists(DEFAULT_CONFIG_PATH):
            return CodecConfig()
        path = DEFAULT_CONFIG_PATH
    return CodecConfig.from_yaml(path)


def _parse_hex(value: str) -> bytes:
    return bytes.fromhex(value.replace(" ", "").replace(":", ""))


def _format_bytes(data: bytes, config: CodecConfig, as_text: bool) -> str:
    if as_text:
        return data.decode(config.text_encoding, errors="replace")
    return data.hex()


def _encode(codec: Codec, data: bytes, bits: Optional[int]) -> str:
    if bits is None:
        return codec.encode(data)
    return codec.encode_bits(bits, data)


def _print_compare(codec: Codec, data: bytes) -> None:
    bits = len(data) * 8
    byte_pair = codec.encode(data)

    print("\n" + "=" * 50)
    print(f"{codec.name.upper()} LENGTH COMPARISON ({len(data)} bytes)")
    print("=" * 50)
    print(f"encode():        {len(byte_pair)} chars")
    print(f"  Output:        {byte_pair}")
    if 1 <= bits <= MAX_BITS:
        optimal = codec.encode_bits(bits, data)
        print(f"encode_bits({bits}): {len(optimal)} chars")
        print(f"  Output:        {optimal}")
    else:
        print(f"encode_bits():   n/a (limited to {MAX_BITS} bits)")
    print("=" * 50)


def _print_alphabets() -> None:
    print("\n" + "=" * 50)
    print("ALPHABETS")
    print("=" * 50)
    for size in SUPPORTED_ALPHABETS:
        codec = get_codec(size)
        print(f"{codec.name}: {codec.alphabet.chars}")
    print("=" * 50)


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _resolve_value(parser, args)

    # Load config
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(config.log_level, config.log_file)

    codec = get_codec(config.alphabet if args.alphabet is None else args.alphabet)
    logger.debug(f"Using {codec.name} codec")

    # Handle --alphabets
    if args.alphabets:
        _print_alphabets()
        return EXIT_OK

    # Handle --api, or config.api.enabled when no other action was given
    action_given = any(
        value is not None
        for value in (args.encode, args.encode_text, args.decode, args.compare)
    )
    if args.api or (config.api.enabled and not action_given):
        from .api import create_api, run_api_server

        api_host = config.api.host if args.api_host is None else args.api_host
        api_port = config.api.port if args.api_port is None else args.api_port
        logger.info(f"Starting API server on {api_host}:{api_port}")
        run_api_server(create_api(config), host=api_host, port=api_port, log_level=config.log_level.lower())
        return EXIT_OK

    try:
        if args.encode is not None:
            data = _parse_hex(args.encode)
            print(_encode(codec, data, args.bits))
        elif args.encode_text is not None:
            data = args.encode_text.encode(config.text_encoding)
            print(_encode(codec, data, args.bits))
        elif args.decode is not None:
            if args.bits is None:
                data = codec.decode(args.decode)
            else:
                data = codec.decode_bits(args.bits, args.decode)
            print(_format_bytes(data, config, args.as_text))
        elif args.compare is not None:
            _print_compare(codec, _parse_hex(args.compare))
        else:
            parser.print_help()
            return EXIT_BAD_INPUT
    except CodecError as e:
        logger.warning(f"Decode failed ({e.kind.value}): {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DECODE_ERROR
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
