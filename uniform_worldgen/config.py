# uniform_worldgen/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for uniform
world generation. These values are used if they are not explicitly provided
by the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC WORLD.
Instead, pass a configuration dictionary to the UniformWorld instance.
================================================================================
"""

# --- Noise Generation ---
DEFAULT_SEED = 1337
# Large prime numbers used to offset the sampling coordinates of each channel,
# so every channel is unique but deterministic from the master seed.
TEMP_SEED_OFFSET = 12347
HUMIDITY_SEED_OFFSET = 45281
DETAIL_SEED_OFFSET = 98761

# --- World Size ---
# The grid is fixed for the lifetime of a world. Every flat index and every
# inverse CDF is relative to these dimensions.
DEFAULT_WORLD_WIDTH_CHUNKS = 64
DEFAULT_WORLD_HEIGHT_CHUNKS = 64

# World-space extent of one chunk (blocks per side). A chunk at grid
# coordinate (x, y) is sampled at (x * 32, y * 32).
CHUNK_SIZE_BLOCKS = (32, 32)

# --- Feature Scales in Blocks ---
# Base altitude layer (continents).
ALTITUDE_FEATURE_SCALE_BLOCKS = 1024.0
ALTITUDE_NOISE_OCTAVES = 4
ALTITUDE_NOISE_PERSISTENCE = 0.5
ALTITUDE_NOISE_LACUNARITY = 2.0

# Detail layer added on top of the base altitude (hills, coastlines).
DETAIL_FEATURE_SCALE_BLOCKS = 128.0
DETAIL_NOISE_OCTAVES = 6
DETAIL_NOISE_PERSISTENCE = 0.5
DETAIL_NOISE_LACUNARITY = 2.0
DETAIL_NOISE_WEIGHT = 0.25

# Climate features (temperature, humidity) are very large.
CLIMATE_FEATURE_SCALE_BLOCKS = 2048.0
CLIMATE_NOISE_OCTAVES = 3
CLIMATE_NOISE_PERSISTENCE = 0.5
CLIMATE_NOISE_LACUNARITY = 2.0

# --- Land & Sea ---
# Chunks whose uniformized altitude falls below this fraction are ocean.
# Because altitude is uniform, this is also the share of the world under water.
SEA_LEVEL_FRACTION = 0.3

# --- Channel Combination Weights ---
# Derived attributes are weighted sums of uniform channels, re-uniformized
# with the weighted Irwin-Hall CDF. All weights must be strictly positive.
TEMPERATURE_NOISE_WEIGHT = 1.0
TEMPERATURE_ALTITUDE_WEIGHT = 0.5
HUMIDITY_NOISE_WEIGHT = 1.0
HUMIDITY_ALTITUDE_WEIGHT = 1.0

# --- Weighted Irwin-Hall Limits ---
# The CDF enumerates 2^N subsets. Beyond ~25 terms the cost becomes
# prohibitive and x^N / N! leaves double precision range.
MAX_IRWIN_HALL_TERMS = 25
# Rounding slack tolerated around [0, 1] for CDF results.
CDF_TOLERANCE = 1e-9

# Channels produced by UniformWorld, in generation order.
UNIFORM_CHANNELS = ("altitude", "temperature", "humidity")
