"""
Training configuration for the office arena environment
Reward shaping presets and algorithm hyperparameters
"""

# Environment parameters
ENV_CONFIG = {
    # "render_mode": None,  # Don't render during training - far too slow with parallel envs
    "width": 960,
    "height": 600,
    "bot_count": 6,
    "max_steps": 3600,  # 60 seconds at 60 ticks/s
    "k_bots": 4,
    "m_items": 3,
}

# ==============================================================================
# REWARD SHAPING CONFIGURATIONS
# These define different reward balancing strategies for experiments
# ==============================================================================

# Reward Config 1: BASELINE (balanced)
REWARD_CONFIG_BASELINE = {
    "name": "baseline",
    "description": "Balanced reward shaping",
    "R_KILL": 1.0,          # Knocking out a bot
    "R_PICKUP": 0.05,       # Picking up an item
    "R_THROW": 0.01,        # Penalty per throw
    "R_DAMAGE": 0.02,       # Penalty per health point lost
    "R_DEATH": 3.0,         # Player knocked out
    "R_MANAGER_HIT": 0.5,   # Hit point taken off the manager
    "R_WIN": 10.0,          # Round won
    "R_TIME": 0.001,        # Small time penalty
}

# Reward Config 2: SURVIVAL (dodge first)
REWARD_CONFIG_SURVIVAL = {
    "name": "survival",
    "description": "Prioritize survival - higher damage/KO penalties, lower combat rewards",
    "R_KILL": 0.5,
    "R_PICKUP": 0.02,
    "R_THROW": 0.02,
    "R_DAMAGE": 0.06,       # MUCH higher damage penalty - encourages dodging
    "R_DEATH": 8.0,         # MUCH higher KO penalty
    "R_MANAGER_HIT": 0.3,
    "R_WIN": 10.0,
    "R_TIME": 0.0005,
}

# Reward Config 3: BOSS_HUNT (go after the manager)
REWARD_CONFIG_BOSS_HUNT = {
    "name": "boss_hunt",
    "description": "Prioritize the manager - big rewards for manager hits and the win",
    "R_KILL": 0.5,
    "R_PICKUP": 0.1,        # Ammo matters for ranged manager hits
    "R_THROW": 0.005,
    "R_DAMAGE": 0.01,
    "R_DEATH": 2.0,
    "R_MANAGER_HIT": 2.0,   # MUCH higher manager reward
    "R_WIN": 30.0,
    "R_TIME": 0.002,        # Higher time penalty - encourage action
}

# All reward configs for easy iteration
REWARD_CONFIGS = {
    "baseline": REWARD_CONFIG_BASELINE,
    "survival": REWARD_CONFIG_SURVIVAL,
    "boss_hunt": REWARD_CONFIG_BOSS_HUNT,
}

# ==============================================================================
# ALGORITHM HYPERPARAMETERS
# ==============================================================================

# PPO hyperparameters
PPO_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 3e-4,
    "n_steps": 2048,
    "batch_size": 256,
    "n_epochs": 10,
    "gamma": 0.99,
    "gae_lambda": 0.95,
    "clip_range": 0.2,
    "ent_coef": 0.01,
    "vf_coef": 0.5,
    "max_grad_norm": 0.5,
    "verbose": 1,
}

# DQN hyperparameters (on the flattened 9 * 2 = 18 action space)
DQN_CONFIG = {
    "policy": "MlpPolicy",
    "learning_rate": 1e-4,
    "buffer_size": 100_000,
    "learning_starts": 1000,
    "batch_size": 128,
    "tau": 1.0,
    "gamma": 0.99,
    "train_freq": 4,
    "gradient_steps": 1,
    "target_update_interval": 1000,
    "exploration_fraction": 0.1,
    "exploration_initial_eps": 1.0,
    "exploration_final_eps": 0.05,
    "verbose": 1,
}

# ==============================================================================
# TRAINING SETTINGS
# ==============================================================================

TRAINING_CONFIG = {
    "total_timesteps": 500_000,
    "save_freq": 10_000,
    "eval_freq": 5_000,
    "log_dir": "./logs",
    "model_dir": "./models",
    "tensorboard_log": "./tensorboard_logs",
}
