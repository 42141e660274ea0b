"""
Edge notifications emitted by the simulation (KOs, kills, events)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class GameEvent(Enum):
    """Edge events a collaborator (audio, UI) can subscribe to"""
    BOT_KO = "bot-ko"
    PLAYER_KO = "player-ko"
    MANAGER_DEFEATED = "manager-defeated"
    KILL_SCORED = "kill-scored"
    MANAGER_SPAWNED = "manager-spawned"
    WORLD_EVENT_STARTED = "world-event-started"
    ROUND_WON = "round-won"
    ITEM_PICKED_UP = "item-picked-up"
    ITEM_THROWN = "item-thrown"


@dataclass
class Notification:
    kind: GameEvent
    tick: int
    subject: Any = None
    # Entity that caused it, when that differs from the subject
    actor: Any = None
