"""
Shuffle domain module.

Decides when to queue tracks, which track to queue, and remembers what has
already been played.
"""

from .activity import NOT_ACTIVE, Active, ActivityDecision, NotActive, decide
from .history import PlayHistory, get_history_path
from .selector import eligible_candidates, select_next
