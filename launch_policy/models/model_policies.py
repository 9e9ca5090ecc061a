"""Flash attention hardware and KV cache format policies."""

from typing import Dict, Optional, Tuple

from .model_types import AcceleratorInfo


VALID_KV_CACHE_TYPES: Tuple[str, ...] = (
    "f32",
    "f16",
    "q8_0",
    "q5_1",
    "q5_0",
    "iq4_nl",
    "q4_1",
    "q4_0",
)

QUANTIZED_KV_CACHE_TYPES: Tuple[str, ...] = (
    "q8_0",
    "q5_1",
    "q5_0",
    "iq4_nl",
    "q4_1",
    "q4_0",
)

EMBEDDING_KV_CACHE_TYPES: Tuple[str, ...] = ("f32", "f16")

# Minimum driver/compute capability major version per library.
# None means the library is supported regardless of version.
FLASH_ATTENTION_LIBRARIES: Dict[str, Optional[int]] = {
    "metal": None,
    "rocm": None,
    "cuda": 7,
}


def accelerator_supports_flash_attention(accelerator: AcceleratorInfo) -> bool:
    """Check whether a single accelerator can run flash attention."""
    if accelerator.library not in FLASH_ATTENTION_LIBRARIES:
        return False
    min_major = FLASH_ATTENTION_LIBRARIES[accelerator.library]
    return min_major is None or accelerator.driver_major >= min_major


def is_quantized_kv_cache_type(cache_type: str) -> bool:
    """Check whether a cache type stores keys and values quantized."""
    return cache_type in QUANTIZED_KV_CACHE_TYPES
