"""CLI output helpers for launch decisions."""

import json
from typing import List, Sequence

from ..models.model_types import AcceleratorInfo, FlashAttentionSupport


def _yes_no(value: bool) -> str:
    """Render a boolean as yes/no."""
    return "yes" if value else "no"


def format_decision_json(
    support: FlashAttentionSupport,
    accelerators: Sequence[AcceleratorInfo],
    params: List[str],
) -> str:
    """Serialize a decision and its parameters as JSON."""
    payload = {
        "support": support.to_dict(),
        "accelerators": [
            {"library": a.library, "driver_major": a.driver_major, "driver_minor": a.driver_minor}
            for a in accelerators
        ],
        "params": params,
    }
    if support.model_detail:
        payload["model_detail"] = support.model_detail
    return json.dumps(payload, indent=2)


def print_decision(
    support: FlashAttentionSupport,
    accelerators: Sequence[AcceleratorInfo],
    params: List[str],
) -> None:
    """Print the decision breakdown and the final launch parameters."""
    print("\n" + "=" * 60)
    print("FLASH ATTENTION DECISION")
    print("=" * 60)
    print(f"  Supported by model:    {_yes_no(support.supported_by_model)}")
    if support.model_detail:
        print(f"    ({support.model_detail})")
    print(f"  Supported by hardware: {_yes_no(support.supported_by_hardware)}")
    for accelerator in accelerators:
        print(f"    - {accelerator.library} {accelerator.driver_major}.{accelerator.driver_minor}")
    print(f"  Embedding model:       {_yes_no(support.is_embedding_model)}")
    print(f"  Enabled:               {_yes_no(support.enabled)}")
    print("\nLaunch parameters:")
    print("  " + (" ".join(params) if params else "(none)"))
