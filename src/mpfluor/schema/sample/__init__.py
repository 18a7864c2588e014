from .size_distribution import LogNormalSizes, box_muller

__all__ = ["LogNormalSizes", "box_muller"]
