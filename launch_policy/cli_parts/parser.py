"""Argument parser construction for the launch policy CLI."""

import argparse
from typing import List

EPILOG = """
Examples:
  # Decide for a metadata dump on the detected hardware
  python -m launch_policy.cli --metadata model.json --flash-attn --kv-cache-type q8_0

  # Use a reference architecture and explicit accelerators
  python -m launch_policy.cli --preset llama --accelerator cuda:8 --flash-attn

  # Append the decision to existing worker parameters
  python -m launch_policy.cli --preset bert --flash-attn -- --model /models/bert --port 8080
"""


def strip_base_params(base_params: List[str]) -> List[str]:
    """Drop the leading ``--`` separator argparse may keep in the remainder."""
    if base_params and base_params[0] == "--":
        return base_params[1:]
    return base_params


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = argparse.ArgumentParser(
        description="Flash attention and KV cache launch policy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--metadata", help="JSON file with the model header key/value pairs")
    source.add_argument("--preset", help="Reference architecture to use as model metadata")
    parser.add_argument("--list-presets", action="store_true", help="List reference architectures and exit")

    parser.add_argument(
        "--flash-attn",
        dest="flash_attn",
        action="store_true",
        help="Request flash attention (overrides LAUNCH_FLASH_ATTENTION)",
    )
    parser.add_argument(
        "--no-flash-attn",
        dest="flash_attn",
        action="store_false",
        help="Do not request flash attention",
    )
    parser.add_argument("--kv-cache-type", help="Requested KV cache type (overrides LAUNCH_KV_CACHE_TYPE)")
    parser.add_argument(
        "--accelerator",
        action="append",
        metavar="LIB[:MAJOR[.MINOR]]",
        help="Accelerator to decide for, repeatable; skips hardware detection",
    )
    parser.add_argument("--json", action="store_true", help="Print the decision as JSON")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("base_params", nargs=argparse.REMAINDER, help="Worker parameters, after --")
    parser.set_defaults(flash_attn=None)

    return parser
