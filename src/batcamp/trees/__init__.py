"""Tree-survey reshaping and density classification."""

from .density import DENSITY_ORDER, assign_density_class, density_summary
from .reshape import (
    OBSERVATION_COLUMNS,
    TreeSurveyResult,
    load_tree_locations,
    melt_surveys,
    placeholder_rows,
    reshape_tree_surveys,
    tree_key,
)

__all__ = [
    "DENSITY_ORDER",
    "OBSERVATION_COLUMNS",
    "TreeSurveyResult",
    "assign_density_class",
    "density_summary",
    "load_tree_locations",
    "melt_surveys",
    "placeholder_rows",
    "reshape_tree_surveys",
    "tree_key",
]
