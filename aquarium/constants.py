"""
Central configuration constants for aquarium simulation.

Defines default values, thresholds, and configuration parameters
used across multiple modules. Lengths are in pixels, speeds in pixels
per tick, and "time" is the simulation clock advanced by TIME_STEP
every tick.
"""

import math

# ============================================================================
# Clock
# ============================================================================

# Simulation time added per tick (not wall-clock derived)
TIME_STEP = 0.008

# Default scene seed when the host does not provide one
DEFAULT_SEED = 20240601


# ============================================================================
# Species Configuration
# ============================================================================

# Weighted species ratio (independent weighted sampling, not exact rounding)
SPECIES_RATIO = {
    'swimmer': 6,
    'drifter': 1,
    'crawler': 3,
    'pulsator': 1,
}

# Swimmers: linear speed, visual width as fraction of scene height
SWIMMER_MIN_SPEED = 0.2
SWIMMER_MAX_SPEED = 0.5
SWIMMER_SIZE_RATIO = 0.25
SWIMMER_WAVE_AMP = 0.03       # Vertical bob amplitude, fraction of scene height
SWIMMER_ANCHOR_BAND = 0.6     # Anchor Y uniform in the upper 60% of the water column

# Drifters: speed is an angular rate for the wander figure
DRIFTER_MIN_SPEED = 0.05
DRIFTER_MAX_SPEED = 0.15
DRIFTER_SIZE_RATIO = 0.15
DRIFTER_RADIUS_BASE = 10.0    # Wander radius = base * uniform(1, 3)
DRIFTER_VERTICAL_SQUASH = 0.4
DRIFTER_ANCHOR_BAND = (0.15, 0.5)  # Mid-upper water column

# Crawlers: creep along the sand surface
CRAWLER_SPEED = 0.1
CRAWLER_SIZE_RATIO = 0.15
CRAWLER_WIGGLE = 2.0          # Vertical wiggle amplitude (px)
CRAWLER_WIGGLE_RATE = 25.0    # Wiggle angular rate (fast)
CRAWLER_ANCHOR_DEPTH = 0.35   # Anchor within the top 35% of the sand bed

# Pulsators (jellyfish-like)
PULSATOR_SIZE_RATIO = 0.2
PULSATOR_PULSE_RATE = 0.8
PULSATOR_SWAY_RATE = 0.3
PULSATOR_SWAY_RADIUS = 20.0
PULSATOR_PROPULSION_THRESHOLD = 0.85
PULSATOR_PROPULSION = -0.4    # Upward impulse while the bell closes
PULSATOR_SINK = 0.05          # Buoyant drift while the bell opens
PULSATOR_WATER_RESISTANCE = 0.97
PULSATOR_WIDTH_SQUEEZE = 0.15  # scale_x = 1 - pulse * squeeze
PULSATOR_HEIGHT_STRETCH = 0.25  # scale_y = 1 + pulse * stretch
PULSATOR_BASE_ALPHA = 0.7
PULSATOR_ALPHA_RANGE = 0.2
PULSATOR_ANCHOR_BAND = (0.2, 0.6)

# Horizontal wrap margin as a multiple of the agent's visual width
WRAP_MARGIN_FACTOR = 1.0


# ============================================================================
# Proximity Avoidance Configuration
# ============================================================================

AVOID_FACTOR = 0.03           # Force per pixel of personal-space intrusion
PERSONAL_SPACE = 1.1          # Threshold as multiple of own visual width
FRICTION = 0.96               # Exponential smoothing of the vertical offset
LATERAL_DAMPING = 0.5         # Share of lateral force applied to translation


# ============================================================================
# Environment Configuration
# ============================================================================

SAND_RATIO = 0.2              # Sand bed height as fraction of scene height
GRADIENT_BANDS = 48           # Horizontal bands used to render vertical gradients

OCEAN_DAY_STOPS = [(0.0, '#005b8a'), (0.7, '#002a44'), (1.0, '#001524')]
OCEAN_NIGHT_STOPS = [(0.0, '#001a2e'), (0.7, '#000c18'), (1.0, '#00060d')]
DAY_NIGHT_RATE = 0.05         # Angular rate of the day/night cycle

SAND_TOP_COLOR = '#dccca3'
SAND_BOTTOM_COLOR = '#a69875'
SAND_BLEMISH_MIN = 20
SAND_BLEMISH_PER_PX = 1.0 / 12.0
SAND_BLEMISH_OPACITY = (0.03, 0.12)

LIGHT_RAY_COUNT = 3
LIGHT_RAY_OPACITY = 0.05
LIGHT_RAY_TOP_HALF_WIDTH = 50.0
LIGHT_RAY_BOTTOM_HALF_WIDTH = 200.0
LIGHT_RAY_SWAY_RATE = 0.2
LIGHT_RAY_SWAY = 0.02

WEED_MIN = 3
WEED_PER_PX = 1.0 / 90.0
WEED_HEIGHT_RANGE = (0.2, 0.5)
WEED_WIDTH_RANGE = (0.02, 0.05)
WEED_SWAY = 0.15
WEED_COLOR = (79, 119, 45, 0.85)

DECOR_COUNT = 6
DECOR_MAX_ATTEMPTS = 12
DECOR_MIN_SEPARATION = 0.12   # Fraction of scene width
DECOR_BASE_HEIGHT = 0.25      # Fraction of scene height at depth 1
DECOR_MIN_SCALE = 0.6
DECOR_EMBED = 0.15            # Fraction of decor height sunk into the sand
DECOR_FOREGROUND_DEPTH = 0.7


# ============================================================================
# Ambient Particle Configuration
# ============================================================================

BUBBLE_MIN = 8
BUBBLE_SPEED_MIN = 0.2
BUBBLE_SPEED_MAX = 0.4
BUBBLE_SIZE_RANGE = (1.0, 3.0)
BUBBLE_SHAKE = 2.0
BUBBLE_COLOR = (255, 255, 255, 0.2)
RECYCLE_MARGIN = 20.0

MARINE_SNOW_MIN = 24
MARINE_SNOW_AREA_PER_PARTICLE = 6000.0
MARINE_SNOW_SPEED = (0.03, 0.12)
MARINE_SNOW_SIZE_RANGE = (0.5, 1.5)
MARINE_SNOW_AMPLITUDE = (0.3, 1.2)
MARINE_SNOW_COLOR = (220, 230, 240, 0.35)

EMITTER_MAX_ACTIVE = 3
EMITTER_INTERVAL = (1.0, 3.0)     # Simulation-time units between spawn checks
EMITTER_DURATION = (0.3, 0.8)
EMITTER_GRACE_PERIOD = 4.0
EMITTER_BURST_PROBABILITY = 0.35
EMITTER_BURST_SPEED = (0.6, 1.1)
EMITTER_BURST_SIZE = (1.0, 2.5)
EMITTER_JITTER = 4.0

TWO_PI = 2.0 * math.pi


# ============================================================================
# Resource Loading Configuration
# ============================================================================

IMAGE_LOAD_TIMEOUT_S = 10.0


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 100  # Print summary every 100 ticks

# Default frame rate for wall-clock schedulers
DEFAULT_FPS = 60.0
