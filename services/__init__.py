"""
Application services layer.

Services own the roster's rating state and team building and expose them
to the host UI.
"""

from services.comparison_service import ComparisonService
from services.pair_selection_service import PairSelector
from services.rating_service import RatingStore
from services.team_building_service import TeamBuildingService

# Result type for consistent error handling
from services.result import Result

__all__ = [
    "ComparisonService",
    "PairSelector",
    "RatingStore",
    "Result",
    "TeamBuildingService",
]
