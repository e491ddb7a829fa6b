"""
Services of the shake detector application.

Services communicate only through events on the bus: ShakeService produces
shakes, ReactionService turns them into display updates.
"""

from .shake_service import ShakeService
from .reaction_service import ReactionService

__all__ = ['ShakeService', 'ReactionService']
