"""
Game entity dataclasses
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from .config import (
    ENTITY_MAX_HEALTH,
    ENTITY_RADIUS,
    MANAGER_HEALTH,
    MANAGER_RADIUS,
    PLAYER_SPEED,
)


class EntityKind(Enum):
    PLAYER = "player"
    BOT = "bot"
    MANAGER = "manager"


class AIState(Enum):
    WANDER = "wander"
    CHASE_PLAYER = "chase-player"
    CHASE_BOT = "chase-bot"


class ItemType(Enum):
    CLIP = "paperclip"
    MUG = "mug"
    STAPLER = "stapler"


class ObstacleKind(Enum):
    DESK = "Desk"
    CUBICLE = "Cubicle"
    WATER_COOLER = "Water Cooler"


@dataclass(frozen=True)
class ItemSpec:
    """Fixed properties of a throwable item type"""
    color: str
    radius: float
    label: str
    damage: int
    speed: float
    splash: int = 0


ITEM_SPECS: Dict[ItemType, ItemSpec] = {
    ItemType.CLIP: ItemSpec(color="#90caf9", radius=8.0, label="\U0001F4CE", damage=20, speed=9.0),
    ItemType.MUG: ItemSpec(color="#a1887f", radius=14.0, label="☕", damage=15, speed=6.0, splash=1),
    ItemType.STAPLER: ItemSpec(color="#e57373", radius=12.0, label="\U0001F4CE", damage=35, speed=5.0),
}


@dataclass
class Knockback:
    """Forced displacement applied instead of normal movement while ticks > 0"""
    x: float = 0.0
    y: float = 0.0
    ticks: int = 0

    @property
    def active(self) -> bool:
        return self.ticks > 0


@dataclass(eq=False)
class Body:
    """Shared base record of every agent with a position and health"""
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    radius: float = ENTITY_RADIUS
    health: int = ENTITY_MAX_HEALTH
    max_health: int = ENTITY_MAX_HEALTH
    alive: bool = True
    name: str = ""

    kind: ClassVar[EntityKind]

    def take_damage(self, amount: int) -> int:
        """Apply damage, clamping health at zero. Returns the health before the hit."""
        before = self.health
        self.health = max(0, self.health - amount)
        return before


@dataclass(eq=False)
class Combatant(Body):
    """Player and bots: can carry up to two items and get knocked back"""
    speed: float = 2.5
    inventory: List["Item"] = field(default_factory=list)
    knockback: Knockback = field(default_factory=Knockback)
    wobble: int = 0


@dataclass(eq=False)
class Player(Combatant):
    """The human-controlled office worker"""
    name: str = "You"
    speed: float = PLAYER_SPEED

    kind: ClassVar[EntityKind] = EntityKind.PLAYER


@dataclass(eq=False)
class Bot(Combatant):
    """AI-controlled coworker"""
    ai_state: AIState = AIState.WANDER
    ai_timer: int = 0
    target: Optional[Combatant] = None
    wander_dir: float = 0.0
    color: str = "#888"

    kind: ClassVar[EntityKind] = EntityKind.BOT


@dataclass(eq=False)
class Manager(Body):
    """Boss: no inventory, a small pool of hit points"""
    name: str = "Manager"
    radius: float = MANAGER_RADIUS
    health: int = MANAGER_HEALTH
    max_health: int = MANAGER_HEALTH
    escape_timer: int = 0

    kind: ClassVar[EntityKind] = EntityKind.MANAGER


@dataclass(eq=False)
class Item:
    """Throwable office supply, resting at a spot or held by one combatant"""
    item_type: ItemType
    x: float
    y: float
    spot_index: Optional[int]
    held_by: Optional[Combatant] = None

    @property
    def spec(self) -> ItemSpec:
        return ITEM_SPECS[self.item_type]

    @property
    def radius(self) -> float:
        return self.spec.radius

    @property
    def resting(self) -> bool:
        return self.held_by is None


@dataclass(eq=False)
class Projectile:
    """Thrown item in flight"""
    item_type: ItemType
    x: float
    y: float
    vx: float
    vy: float
    damage: int
    radius: float
    owner: Combatant
    life: int
    splash: int = 0

    @property
    def alive(self) -> bool:
        return self.life > 0


@dataclass(frozen=True)
class Obstacle:
    """Static rectangle, immutable after layout generation"""
    x: float
    y: float
    w: float
    h: float
    kind: ObstacleKind


@dataclass
class HauntedPrinter:
    """Roaming hazard spawned by the haunted-printer event"""
    x: float
    y: float
    vx: float
    vy: float
    ticks: int
