"""Flash attention and KV cache validation for inference worker launches."""

import logging
from typing import Callable, List, Optional, Sequence

from ..models.model_metadata import ModelMetadata
from ..models.model_policies import (
    EMBEDDING_KV_CACHE_TYPES,
    VALID_KV_CACHE_TYPES,
    accelerator_supports_flash_attention,
    is_quantized_kv_cache_type,
)
from ..models.model_types import AcceleratorInfo, FlashAttentionSupport, ModelCapabilities

logger = logging.getLogger(__name__)

SupportObserver = Callable[[FlashAttentionSupport], None]


def inspect_model(metadata: ModelMetadata) -> ModelCapabilities:
    """
    Inspect model metadata for flash attention compatibility.

    The model is supported when both K and V embedding head counts are
    present and equal. Embedding models are detected by their pooling type.

    Args:
        metadata: Capability view of the model header

    Returns:
        ModelCapabilities for the model
    """
    head_count_k = metadata.head_count_k
    head_count_v = metadata.head_count_v

    return ModelCapabilities(
        is_embedding_model=metadata.has_pooling_type,
        supported_by_model=head_count_k != 0 and head_count_v != 0 and head_count_k == head_count_v,
        head_count_k=head_count_k,
        head_count_v=head_count_v,
    )


def check_hardware_support(accelerators: Sequence[AcceleratorInfo]) -> bool:
    """
    Check that every accelerator in use supports flash attention.

    An empty list counts as supported.
    """
    return all(accelerator_supports_flash_attention(a) for a in accelerators)


def validate_flash_attention_support(
    metadata: ModelMetadata,
    accelerators: Sequence[AcceleratorInfo],
    flash_attn_requested: bool,
    observer: Optional[SupportObserver] = None,
) -> FlashAttentionSupport:
    """
    Decide whether flash attention is enabled for this model and hardware.

    Args:
        metadata: Capability view of the model header
        accelerators: Accelerators the worker will run on
        flash_attn_requested: Whether the caller asked for flash attention
        observer: Optional callable that receives the result, e.g. for logging

    Returns:
        FlashAttentionSupport with every fact filled in
    """
    capabilities = inspect_model(metadata)
    hardware_supported = check_hardware_support(accelerators)

    enabled = (
        flash_attn_requested
        and capabilities.supported_by_model
        and hardware_supported
        and not capabilities.is_embedding_model
    )

    support = FlashAttentionSupport(
        supported_by_model=capabilities.supported_by_model,
        supported_by_hardware=hardware_supported,
        is_embedding_model=capabilities.is_embedding_model,
        enabled=enabled,
        model_detail=capabilities.unsupported_reason,
    )

    if observer is not None:
        observer(support)
    return support


def log_flash_attention_support(support: FlashAttentionSupport) -> None:
    """Log the reasoning behind a flash attention verdict."""
    if support.model_detail:
        logger.debug("Model does not support flash attention: %s", support.model_detail)

    logger.debug(
        "Flash attention status: supported_by_model=%s supported_by_hardware=%s "
        "is_embedding_model=%s enabled=%s",
        support.supported_by_model,
        support.supported_by_hardware,
        support.is_embedding_model,
        support.enabled,
    )


def validate_kv_cache_type(cache_type: str, is_embedding_model: bool) -> str:
    """
    Validate a requested KV cache type for the model class.

    Invalid types, and quantized types for embedding models, are ignored
    with a warning and "" (use the default) is returned.

    Args:
        cache_type: Requested cache type, "" for no preference
        is_embedding_model: Whether the model is an embedding model

    Returns:
        The cache type to pass to the worker, or ""
    """
    if not cache_type:
        return ""

    if cache_type not in VALID_KV_CACHE_TYPES:
        logger.warning("Invalid cache type '%s', ignoring", cache_type)
        return ""

    if is_embedding_model and cache_type not in EMBEDDING_KV_CACHE_TYPES:
        logger.warning(
            "Only f16 and f32 cache types are supported for embedding models, ignoring '%s'",
            cache_type,
        )
        return ""

    return cache_type


def get_server_params(
    flash_attn: FlashAttentionSupport,
    kv_cache_type: str,
    base_params: Sequence[str],
) -> List[str]:
    """
    Build the worker launch parameters.

    The base parameters come first, unchanged, followed by ``--flash-attn``
    and ``--kv-cache-type <type>`` when they apply.

    Args:
        flash_attn: Flash attention verdict for the launch
        kv_cache_type: Requested KV cache type, "" for the default
        base_params: Parameters the caller already assembled

    Returns:
        A new list of launch parameters
    """
    params = list(base_params)

    if not flash_attn.enabled:
        logger.info("Flash attention not enabled")
        if not flash_attn.is_embedding_model and is_quantized_kv_cache_type(kv_cache_type):
            logger.warning(
                "Quantized cache types require flash attention. Falling back to default cache types."
            )
        return params

    params.append("--flash-attn")
    logger.info("Enabling flash attention")

    # KV cache type is only set alongside flash attention
    validated_type = validate_kv_cache_type(kv_cache_type, flash_attn.is_embedding_model)
    if validated_type:
        params.extend(["--kv-cache-type", validated_type])
        logger.debug("Setting cache type: %s", validated_type)

    return params
