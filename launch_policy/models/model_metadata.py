"""Typed access to the key/value metadata stored in a model header."""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Union

logger = logging.getLogger(__name__)


def _as_uint(value: Any) -> int:
    """Coerce a metadata value to a non-negative int, 0 when not numeric."""
    if value is None or isinstance(value, (bool, str)):
        return 0
    if isinstance(value, float) and (not math.isfinite(value) or not value.is_integer()):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


@dataclass(frozen=True)
class ModelMetadata:
    """
    Capability view of a model's KV metadata.

    Architecture-scoped keys such as ``llama.attention.key_length`` are
    resolved once when the view is built, so policy code only deals with
    named fields.
    """

    architecture: str
    head_count_k: int
    head_count_v: int
    has_pooling_type: bool

    @classmethod
    def from_kv(cls, kv: Mapping[str, Any]) -> "ModelMetadata":
        """
        Build the capability view from a raw metadata mapping.

        Missing or non-numeric head counts become 0.

        Args:
            kv: Mapping of metadata keys to scalar values

        Returns:
            ModelMetadata for the mapping
        """
        architecture = kv.get("general.architecture") or ""
        if not isinstance(architecture, str):
            architecture = str(architecture)

        return cls(
            architecture=architecture,
            head_count_k=_as_uint(kv.get(f"{architecture}.attention.key_length")),
            head_count_v=_as_uint(kv.get(f"{architecture}.attention.value_length")),
            has_pooling_type=f"{architecture}.pooling_type" in kv,
        )


def load_model_metadata(path: Union[str, Path]) -> ModelMetadata:
    """
    Load model metadata from a JSON dump of the header key/value pairs.

    Args:
        path: Path to a JSON file holding a single object

    Returns:
        ModelMetadata built from the file contents

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file does not hold a JSON object
    """
    metadata_file = Path(path)
    if not metadata_file.exists():
        raise FileNotFoundError(f"Metadata file not found: {metadata_file}")

    with open(metadata_file, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Metadata file {metadata_file} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(
            f"Metadata file {metadata_file} must contain a JSON object, got {type(data).__name__}"
        )

    metadata = ModelMetadata.from_kv(data)
    logger.debug("Loaded metadata for architecture '%s' from %s", metadata.architecture, metadata_file)
    return metadata
