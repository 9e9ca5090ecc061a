"""Command-line interface for the launch policy."""

import logging
import sys
from typing import List, Optional

from .cli_parts.common import (
    print_available_presets,
    resolve_accelerators,
    resolve_metadata,
    setup_logging,
)
from .cli_parts.output import format_decision_json, print_decision
from .cli_parts.parser import create_parser, strip_base_params
from .config import LaunchSettings, load_settings_from_env
from .runtime.validation import (
    get_server_params,
    log_flash_attention_support,
    validate_flash_attention_support,
)


def apply_cli_overrides(settings: LaunchSettings, args) -> LaunchSettings:
    """Command-line flags take precedence over environment settings."""
    if args.flash_attn is not None:
        settings.flash_attention = args.flash_attn
    if args.kv_cache_type is not None:
        settings.kv_cache_type = args.kv_cache_type.strip().lower()
    if args.verbose:
        settings.verbose = True
    if args.log_file:
        settings.log_file = args.log_file
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = apply_cli_overrides(load_settings_from_env(), args)
    logger = logging.getLogger(__name__)

    try:
        setup_logging(settings.verbose, settings.log_file, stream=sys.stderr if args.json else None)
        if args.list_presets:
            print_available_presets()
            return 0

        metadata = resolve_metadata(args, parser)
        accelerators = resolve_accelerators(args)
        logger.info(
            "Deciding flash attention for '%s' on %d accelerator(s)",
            metadata.architecture,
            len(accelerators),
        )

        support = validate_flash_attention_support(
            metadata,
            accelerators,
            settings.flash_attention,
            observer=log_flash_attention_support,
        )
        params = get_server_params(support, settings.kv_cache_type, strip_base_params(args.base_params))

    except (OSError, ValueError) as e:
        logger.error("Launch decision failed: %s", e)
        print(f"\nError: {e}", file=sys.stderr if args.json else sys.stdout)
        return 1

    if args.json:
        print(format_decision_json(support, accelerators, params))
    else:
        print_decision(support, accelerators, params)
    return 0


def cli_entry_point() -> None:
    """Entry point for setuptools console script."""
    sys.exit(main())


if __name__ == "__main__":
    cli_entry_point()
