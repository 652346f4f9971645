from .selection import select_variants
from .collect import collect_stats
from .finemap import merge_fine_mapping

__all__ = ["select_variants", "collect_stats", "merge_fine_mapping"]
