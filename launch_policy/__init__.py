"""Launch Policy

Decides, for a loaded model and the detected accelerators, whether a model
server may enable flash attention and which KV cache format it may use, and
turns that decision into inference worker launch flags.
"""

__version__ = "1.0.0"
__author__ = "Launch Policy Team"
