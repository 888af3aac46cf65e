"""Inference layer - Musical understanding built on analysis features.

Pipeline: Chromagram -> Key
"""

from .key import KeyDetector, rank_keys, estimate_key, MAJOR_PROFILE, MINOR_PROFILE

__all__ = [
    "KeyDetector",
    "rank_keys",
    "estimate_key",
    "MAJOR_PROFILE",
    "MINOR_PROFILE",
]
