"""
Fixed tuning constants for the office arena simulation.

All durations are in ticks (the core assumes ~60 ticks per second but never
reads a wall clock).
"""

# Arena
ARENA_WIDTH = 960
ARENA_HEIGHT = 600
BOT_COUNT = 6

# Entities
ENTITY_RADIUS = 18.0
ENTITY_MAX_HEALTH = 100
PLAYER_SPEED = 2.8
BOT_SPEED_RANGE = (2.1, 2.9)
BOT_SATURATION = 60
BOT_LIGHTNESS = 55
INVENTORY_CAPACITY = 2
PICKUP_MARGIN = 8.0
WOBBLE_TICKS = 8
RESPAWN_DELAY_TICKS = 240  # 4s

# Projectiles / knockback
PROJECTILE_LIFE = 90
KNOCKBACK_FORCE = 5.0
KNOCKBACK_TICKS = 7

# Layout
DESK_SIZE = (120, 40)
CUBICLE_SIZE = (80, 80)
COOLER_SIZE = (40, 40)
ITEM_SPOT_MARGIN = 30
SPAWN_GRID_STEP = 40
SPAWN_GRID_INSET = 60
SPAWN_OBSTACLE_MARGIN = 20
SPAWN_MIN_DISTANCE = 40.0

# Bot AI
AI_INITIAL_TICKS = (30, 120)
AI_RETARGET_TICKS = (60, 180)
AI_PLAYER_TARGET_CHANCE = 0.15
AI_MAX_TARGETERS = 2
AI_WANDER_CHANCE = 0.2
AI_THROW_RANGE = 150.0
AI_THROW_CHANCE = 0.03
CHASE_SPEED_FACTOR = 0.95
WANDER_SPEED_FACTOR = 0.6
WANDER_KICK_CHANCE = 0.03
WANDER_KICK = 0.5
SEPARATION_RADIUS = 40.0
SEPARATION_PUSH = 0.6
EVACUATION_SPEED_FACTOR = 1.2
EVACUATION_CORNER_INSET = 10.0

# World events
EVENT_INTERVAL_TICKS = 30 * 60
EVENT_MESSAGE_TICKS = 180  # 3s
SLOW_FIELD_TICKS = 8 * 60
SLOW_FIELD_FACTOR = 0.55
EVACUATION_TICKS = 7 * 60
HAZARD_TICKS = 7 * 60
HAZARD_SPEED = 4.0
HAZARD_RADIUS = 30.0
HAZARD_DAMAGE_RADIUS = 40.0
HAZARD_DAMAGE = 1

# Manager (boss)
MANAGER_SPAWN_TICKS = (600, 1200)
MANAGER_HEALTH = 8
MANAGER_RADIUS = 20.0
MANAGER_EDGE_INSET = 40
MANAGER_BOUNDS_INSET = 30.0
MANAGER_MELEE_REACH = (28.0, 32.0)
MANAGER_MELEE_COOLDOWN = 40
MANAGER_PROJECTILE_REACH = (18.0, 22.0)
MANAGER_FLEE_RADIUS = 320.0
MANAGER_FLEE_ACCEL = 0.18
MANAGER_AVOID_RADIUS = 64.0
MANAGER_AVOID_ACCEL = 0.12
MANAGER_MAX_SPEED = 3.0
MANAGER_FRICTION = 0.91
MANAGER_DEFEAT_DELAY_TICKS = 48  # 800ms
