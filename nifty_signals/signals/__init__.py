"""Directional conviction signals derived from option-chain positioning."""

from .base import ConvictionInputs, UNWIND_THRESHOLD, WritingFlow, measure_writing_flow, round_half_up
from .conviction import ConvictionEvaluator, format_indian, format_ratio

__all__ = [
    "ConvictionEvaluator",
    "ConvictionInputs",
    "UNWIND_THRESHOLD",
    "WritingFlow",
    "format_indian",
    "format_ratio",
    "measure_writing_flow",
    "round_half_up",
]
