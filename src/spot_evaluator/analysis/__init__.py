from .compatibility import is_compatible
from .replacements import ReplacementRanker, rank_options
from .cost_evaluation import InventoryEvaluator

__all__ = ['is_compatible', 'ReplacementRanker', 'rank_options', 'InventoryEvaluator']
