"""Accelerator discovery using torch device probing."""

import logging
from typing import List

import torch

from ..models.model_types import AcceleratorInfo

logger = logging.getLogger(__name__)

CPU_ACCELERATOR = AcceleratorInfo(library="cpu", name="cpu")


def _detect_cuda_devices() -> List[AcceleratorInfo]:
    # ROCm builds of torch expose HIP devices through the torch.cuda API
    library = "rocm" if getattr(torch.version, "hip", None) else "cuda"
    accelerators = []
    for index in range(torch.cuda.device_count()):
        major, minor = torch.cuda.get_device_capability(index)
        accelerators.append(
            AcceleratorInfo(
                library=library,
                driver_major=major,
                driver_minor=minor,
                device_id=str(index),
                name=torch.cuda.get_device_name(index),
            )
        )
    return accelerators


def _mps_available() -> bool:
    mps = getattr(torch.backends, "mps", None)
    return mps is not None and mps.is_available()


def detect_accelerators() -> List[AcceleratorInfo]:
    """
    Enumerate the accelerators available to this process.

    Returns:
        One AcceleratorInfo per CUDA/ROCm device, a single metal entry on
        Apple silicon, or a single cpu entry when no accelerator is found
    """
    try:
        if torch.cuda.is_available():
            accelerators = _detect_cuda_devices()
            if accelerators:
                logger.debug("Detected accelerators: %s", accelerators)
                return accelerators

        if _mps_available():
            logger.debug("Detected Apple MPS device")
            return [AcceleratorInfo(library="metal", name="mps")]
    except RuntimeError as e:
        logger.warning("Accelerator detection failed, assuming CPU only: %s", e)

    return [CPU_ACCELERATOR]


def parse_accelerator(spec: str) -> AcceleratorInfo:
    """
    Parse an accelerator given as ``library[:major[.minor]]``.

    Examples: ``cuda:8``, ``cuda:7.5``, ``metal``.

    Raises:
        ValueError: If the version part is not numeric
    """
    library, _, version = spec.strip().partition(":")
    library = library.lower()
    if not library:
        raise ValueError(f"Accelerator '{spec}' is missing a library name")

    if not version:
        return AcceleratorInfo(library=library)

    major_text, _, minor_text = version.partition(".")
    try:
        major = int(major_text)
        minor = int(minor_text) if minor_text else 0
    except ValueError:
        raise ValueError(
            f"Accelerator '{spec}' has an invalid version, expected library[:major[.minor]]"
        ) from None
    return AcceleratorInfo(library=library, driver_major=major, driver_minor=minor)
