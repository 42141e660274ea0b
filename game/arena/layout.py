"""
Office floor layout: obstacles, item spots and spawn candidates
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from .config import (
    COOLER_SIZE,
    CUBICLE_SIZE,
    DESK_SIZE,
    ITEM_SPOT_MARGIN,
    SPAWN_GRID_INSET,
    SPAWN_GRID_STEP,
    SPAWN_OBSTACLE_MARGIN,
)
from .entities import Obstacle, ObstacleKind
from .utils import point_near_rect

Point = Tuple[float, float]


@dataclass
class Layout:
    obstacles: List[Obstacle] = field(default_factory=list)
    item_spots: List[Point] = field(default_factory=list)
    spawn_points: List[Point] = field(default_factory=list)


def generate_obstacles(width: int, height: int) -> List[Obstacle]:
    """Desks every 320x220, cubicles every 320x260, and a water cooler in each corner"""
    obstacles: List[Obstacle] = []

    desk_w, desk_h = DESK_SIZE
    for row in range(height // 220):
        for col in range(width // 320):
            obstacles.append(Obstacle(60 + col * 320, 40 + row * 220, desk_w, desk_h, ObstacleKind.DESK))

    cub_w, cub_h = CUBICLE_SIZE
    for row in range(height // 260):
        for col in range(width // 320):
            obstacles.append(Obstacle(180 + col * 320, 120 + row * 260, cub_w, cub_h, ObstacleKind.CUBICLE))

    cw, ch = COOLER_SIZE
    for x, y in ((40, 40), (width - 80, 40), (40, height - 80), (width - 80, height - 80)):
        obstacles.append(Obstacle(x, y, cw, ch, ObstacleKind.WATER_COOLER))

    return obstacles


def _clear_of(point: Point, obstacles: List[Obstacle], margin: float) -> bool:
    px, py = point
    return not any(point_near_rect(px, py, o.x, o.y, o.w, o.h, margin) for o in obstacles)


def generate_item_spots(width: int, height: int, obstacles: List[Obstacle]) -> List[Point]:
    spots = [
        (float(x), float(y))
        for x in range(120, width - 120, 220)
        for y in range(120, height - 120, 200)
    ]
    return [p for p in spots if _clear_of(p, obstacles, ITEM_SPOT_MARGIN)]


def generate_spawn_points(width: int, height: int, obstacles: List[Obstacle]) -> List[Point]:
    points = [
        (float(x), float(y))
        for x in range(SPAWN_GRID_INSET, width - SPAWN_GRID_INSET, SPAWN_GRID_STEP)
        for y in range(SPAWN_GRID_INSET, height - SPAWN_GRID_INSET, SPAWN_GRID_STEP)
    ]
    return [p for p in points if _clear_of(p, obstacles, SPAWN_OBSTACLE_MARGIN)]


def generate_layout(width: int, height: int) -> Layout:
    obstacles = generate_obstacles(width, height)
    return Layout(
        obstacles=obstacles,
        item_spots=generate_item_spots(width, height, obstacles),
        spawn_points=generate_spawn_points(width, height, obstacles),
    )
