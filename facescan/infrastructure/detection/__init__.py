from .precomputed import PrecomputedDetector

__all__ = ["PrecomputedDetector"]
