"""
Standard error codes for the service layer.

These error codes let the host UI react to specific failures without parsing
error message text.

Usage:
    from services.error_codes import PLAYER_NOT_FOUND
    from services.result import Result

    if player_id not in store:
        return Result.fail("Player not found", code=PLAYER_NOT_FOUND)
"""

# General errors
VALIDATION_ERROR = "validation_error"
STATE_ERROR = "state_error"

# Roster errors
PLAYER_NOT_FOUND = "player_not_found"
PLAYER_ALREADY_EXISTS = "player_already_exists"
UNKNOWN_POSITION = "unknown_position"

# Comparison errors
SELF_COMPARISON = "self_comparison"
INSUFFICIENT_PLAYERS = "insufficient_players"

# Optimisation errors
COMPOSITION_ERROR = "composition_error"
OPTIMIZATION_IN_PROGRESS = "optimization_in_progress"
OPTIMIZATION_CANCELLED = "optimization_cancelled"
