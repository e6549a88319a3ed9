"""
Domain models - pure data structures representing roster and team entities.
"""

from domain.models.activity import VOLLEYBALL, ActivityConfig
from domain.models.player import Player
from domain.models.team import Candidate, Team, TeamSlot

__all__ = ["ActivityConfig", "VOLLEYBALL", "Player", "Team", "TeamSlot", "Candidate"]
