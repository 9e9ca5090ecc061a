"""Shared CLI helpers: logging, metadata and accelerator resolution."""

import argparse
import logging
import sys
from typing import List, Optional, TextIO

from ..models.model_metadata import ModelMetadata, load_model_metadata
from ..models.model_presets import KNOWN_ARCHITECTURE_PRESETS, get_available_presets, get_preset_metadata
from ..models.model_types import AcceleratorInfo
from ..utils.gpu_utils import detect_accelerators, parse_accelerator


def setup_logging(verbose: bool = False, log_file: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    logging.getLogger("torch").setLevel(logging.WARNING)


def resolve_metadata(args: argparse.Namespace, parser: argparse.ArgumentParser) -> ModelMetadata:
    """Resolve model metadata from --metadata or --preset."""
    if args.preset:
        return get_preset_metadata(args.preset)
    if args.metadata:
        return load_model_metadata(args.metadata)

    parser.error("Either --metadata or --preset is required (use --list-presets to see presets)")
    return ModelMetadata.from_kv({})


def resolve_accelerators(args: argparse.Namespace) -> List[AcceleratorInfo]:
    """Use accelerators given on the command line, or detect them."""
    if args.accelerator:
        return [parse_accelerator(spec) for spec in args.accelerator]
    return detect_accelerators()


def print_available_presets() -> None:
    """Print reference architectures with their attention shape."""
    print("Available Presets:")
    print("-" * 60)
    print(f"{'Preset':<14} {'K':<6} {'V':<6} {'Embedding'}")
    print("-" * 60)

    for name in get_available_presets():
        metadata = get_preset_metadata(name)
        print(
            f"{name:<14} {metadata.head_count_k:<6} {metadata.head_count_v:<6} "
            f"{'yes' if metadata.has_pooling_type else 'no'}"
        )

    print(f"\nTotal presets: {len(KNOWN_ARCHITECTURE_PRESETS)}")
