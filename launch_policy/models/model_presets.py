"""Reference metadata for common model architectures."""

from typing import Any, Dict, List

from .model_metadata import ModelMetadata


# Header key/value pairs as they appear in real model files
KNOWN_ARCHITECTURE_PRESETS: Dict[str, Dict[str, Any]] = {
    "llama": {
        "general.architecture": "llama",
        "llama.attention.head_count": 32,
        "llama.attention.key_length": 128,
        "llama.attention.value_length": 128,
    },
    "qwen2": {
        "general.architecture": "qwen2",
        "qwen2.attention.head_count": 28,
        "qwen2.attention.key_length": 128,
        "qwen2.attention.value_length": 128,
    },
    "gemma2": {
        "general.architecture": "gemma2",
        "gemma2.attention.head_count": 8,
        "gemma2.attention.key_length": 256,
        "gemma2.attention.value_length": 256,
    },
    "deepseek2": {
        "general.architecture": "deepseek2",
        "deepseek2.attention.head_count": 16,
        "deepseek2.attention.key_length": 192,
        "deepseek2.attention.value_length": 128,
    },
    "bert": {
        "general.architecture": "bert",
        "bert.attention.head_count": 12,
        "bert.attention.key_length": 64,
        "bert.attention.value_length": 64,
        "bert.pooling_type": 1,
    },
    "nomic-bert": {
        "general.architecture": "nomic-bert",
        "nomic-bert.attention.head_count": 12,
        "nomic-bert.pooling_type": 1,
    },
}


def get_available_presets() -> List[str]:
    """Get all preset names, sorted."""
    return sorted(KNOWN_ARCHITECTURE_PRESETS.keys())


def get_preset_kv(name: str) -> Dict[str, Any]:
    """Get a copy of the raw metadata for a preset."""
    if name not in KNOWN_ARCHITECTURE_PRESETS:
        raise ValueError(
            f"Preset {name} not supported. "
            f"Available presets: {get_available_presets()}"
        )
    return dict(KNOWN_ARCHITECTURE_PRESETS[name])


def get_preset_metadata(name: str) -> ModelMetadata:
    """Get the capability view for a preset architecture."""
    return ModelMetadata.from_kv(get_preset_kv(name))
