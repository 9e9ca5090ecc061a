"""Core datatypes shared by the launch policy."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AcceleratorInfo:
    """Snapshot of one detected accelerator."""

    library: str  # cuda, rocm, metal, cpu
    driver_major: int = 0
    driver_minor: int = 0
    device_id: str = "0"
    name: str = ""


@dataclass(frozen=True)
class ModelCapabilities:
    """What the model metadata says about flash attention compatibility."""

    is_embedding_model: bool
    supported_by_model: bool
    head_count_k: int
    head_count_v: int

    @property
    def unsupported_reason(self) -> Optional[str]:
        """Short explanation of why the model cannot use flash attention."""
        if self.supported_by_model:
            return None
        if self.head_count_k == 0 or self.head_count_v == 0:
            return "missing embedding head count for K or V"
        return "embedding head count K does not equal V"


@dataclass(frozen=True)
class FlashAttentionSupport:
    """Explainable flash attention verdict for one launch request."""

    supported_by_model: bool
    supported_by_hardware: bool
    is_embedding_model: bool
    enabled: bool
    model_detail: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "supported_by_model": self.supported_by_model,
            "supported_by_hardware": self.supported_by_hardware,
            "is_embedding_model": self.is_embedding_model,
            "enabled": self.enabled,
        }
