# uniform_worldgen/channels.py

"""
================================================================================
UNIFORM WORLD CHANNELS
================================================================================
This module contains the UniformWorld class, which samples the noise channels
of a world (altitude, temperature, humidity) once per chunk, converts each of
them to a uniform distribution with uniform_noise, and derives combined
climate attributes by re-uniformizing weighted sums of uniform channels with
the weighted Irwin-Hall CDF.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Parameters which override the internal defaults.
      Expected keys include 'seed', 'world_width_chunks', etc.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - InverseCdf arrays (width * height, 2) per channel.
    - NumPy arrays of shape (height, width) with values in [0, 1].
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is
  deterministic. Ocean chunks are absent from the climate channels, so land
  chunks alone span the full uniform range.
================================================================================
"""

import logging
import math
import numbers
import time

import numpy as np

from . import config as DEFAULTS
from . import noise
from .errors import ConfigurationError
from .grid import GridIndex
from .irwin_hall import uniformize_weighted_sum
from .uniform import fractions, uniform_noise, uniformize_field, values


class UniformWorld:
    """
    Generates and caches the uniformized noise channels of a world.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger, permutation_table: np.ndarray = None):
        """
        Initializes the world.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
            permutation_table (np.ndarray, optional): A pre-computed noise
                permutation table. If None, one will be generated from the seed.
        """
        self.logger = logger
        self.user_config = config
        self.logger.info("UniformWorld initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'temp_seed_offset': self.user_config.get('temp_seed_offset', DEFAULTS.TEMP_SEED_OFFSET),
            'humidity_seed_offset': self.user_config.get('humidity_seed_offset', DEFAULTS.HUMIDITY_SEED_OFFSET),
            'detail_seed_offset': self.user_config.get('detail_seed_offset', DEFAULTS.DETAIL_SEED_OFFSET),

            'world_width_chunks': self.user_config.get('world_width_chunks', DEFAULTS.DEFAULT_WORLD_WIDTH_CHUNKS),
            'world_height_chunks': self.user_config.get('world_height_chunks', DEFAULTS.DEFAULT_WORLD_HEIGHT_CHUNKS),
            'chunk_size_blocks': tuple(self.user_config.get('chunk_size_blocks', DEFAULTS.CHUNK_SIZE_BLOCKS)),

            'altitude_feature_scale_blocks': self.user_config.get('altitude_feature_scale_blocks', DEFAULTS.ALTITUDE_FEATURE_SCALE_BLOCKS),
            'altitude_noise_octaves': self.user_config.get('altitude_noise_octaves', DEFAULTS.ALTITUDE_NOISE_OCTAVES),
            'altitude_noise_persistence': self.user_config.get('altitude_noise_persistence', DEFAULTS.ALTITUDE_NOISE_PERSISTENCE),
            'altitude_noise_lacunarity': self.user_config.get('altitude_noise_lacunarity', DEFAULTS.ALTITUDE_NOISE_LACUNARITY),

            'detail_feature_scale_blocks': self.user_config.get('detail_feature_scale_blocks', DEFAULTS.DETAIL_FEATURE_SCALE_BLOCKS),
            'detail_noise_octaves': self.user_config.get('detail_noise_octaves', DEFAULTS.DETAIL_NOISE_OCTAVES),
            'detail_noise_persistence': self.user_config.get('detail_noise_persistence', DEFAULTS.DETAIL_NOISE_PERSISTENCE),
            'detail_noise_lacunarity': self.user_config.get('detail_noise_lacunarity', DEFAULTS.DETAIL_NOISE_LACUNARITY),
            'detail_noise_weight': self.user_config.get('detail_noise_weight', DEFAULTS.DETAIL_NOISE_WEIGHT),

            'climate_feature_scale_blocks': self.user_config.get('climate_feature_scale_blocks', DEFAULTS.CLIMATE_FEATURE_SCALE_BLOCKS),
            'climate_noise_octaves': self.user_config.get('climate_noise_octaves', DEFAULTS.CLIMATE_NOISE_OCTAVES),
            'climate_noise_persistence': self.user_config.get('climate_noise_persistence', DEFAULTS.CLIMATE_NOISE_PERSISTENCE),
            'climate_noise_lacunarity': self.user_config.get('climate_noise_lacunarity', DEFAULTS.CLIMATE_NOISE_LACUNARITY),

            'sea_level_fraction': self.user_config.get('sea_level_fraction', DEFAULTS.SEA_LEVEL_FRACTION),
            'temperature_noise_weight': self.user_config.get('temperature_noise_weight', DEFAULTS.TEMPERATURE_NOISE_WEIGHT),
            'temperature_altitude_weight': self.user_config.get('temperature_altitude_weight', DEFAULTS.TEMPERATURE_ALTITUDE_WEIGHT),
            'humidity_noise_weight': self.user_config.get('humidity_noise_weight', DEFAULTS.HUMIDITY_NOISE_WEIGHT),
            'humidity_altitude_weight': self.user_config.get('humidity_altitude_weight', DEFAULTS.HUMIDITY_ALTITUDE_WEIGHT),
        }
        self._validate_settings()

        # --- Public Properties for easy access ---
        self.seed = self.settings['seed']
        self.grid = GridIndex(self.settings['world_width_chunks'], self.settings['world_height_chunks'])
        self.cell_size = self.settings['chunk_size_blocks']

        # --- Initialize Noise ---
        if permutation_table is not None:
            self._p = np.asarray(permutation_table, dtype=np.int64)
            self.logger.debug("Initialized with injected permutation table.")
        else:
            self.logger.debug("No permutation table provided, generating new one from seed.")
            self._p = noise.make_permutation_table(self.seed)
        self.permutation_table = self._p

        self._inverse_cdfs = {}
        self._land_mask = None

        self.logger.info(f"UniformWorld initialized with seed: {self.seed}")
        self.logger.info(
            f"World dimensions: {self.grid.width}x{self.grid.height} chunks "
            f"({self.grid.width * self.cell_size[0]}x{self.grid.height * self.cell_size[1]} blocks)"
        )

    def _validate_settings(self):
        for key in ('world_width_chunks', 'world_height_chunks'):
            value = self.settings[key]
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"'{key}' must be a positive integer, got {value!r}")

        if len(self.settings['chunk_size_blocks']) != 2:
            raise ConfigurationError("'chunk_size_blocks' must be a pair of numbers")

        sea_level = self.settings['sea_level_fraction']
        if not 0.0 <= sea_level <= 1.0:
            raise ConfigurationError(f"'sea_level_fraction' must lie in [0, 1], got {sea_level!r}")

        for key in ('temperature_noise_weight', 'temperature_altitude_weight',
                    'humidity_noise_weight', 'humidity_altitude_weight'):
            weight = self.settings[key]
            if not (isinstance(weight, numbers.Real) and math.isfinite(weight) and weight > 0):
                raise ConfigurationError(f"'{key}' must be finite and strictly positive, got {self.settings[key]!r}")

    # --- Sampling Callbacks ---

    def sample_altitude(self, index: int, position: tuple[float, float]) -> float:
        """Continental noise plus a weighted detail layer. Present everywhere."""
        x, y = position
        scale = self.settings['altitude_feature_scale_blocks']
        base = noise.perlin_noise_at(
            self._p, x / scale, y / scale,
            self.settings['altitude_noise_octaves'],
            self.settings['altitude_noise_persistence'],
            self.settings['altitude_noise_lacunarity']
        )
        offset = self.settings['detail_seed_offset']
        detail_scale = self.settings['detail_feature_scale_blocks']
        detail = noise.perlin_noise_at(
            self._p, (x + offset) / detail_scale, (y + offset) / detail_scale,
            self.settings['detail_noise_octaves'],
            self.settings['detail_noise_persistence'],
            self.settings['detail_noise_lacunarity']
        )
        return float(base + detail * self.settings['detail_noise_weight'])

    def _sample_climate(self, index: int, position: tuple[float, float], seed_offset: int):
        if not self.land_mask()[index]:
            return None
        x, y = position
        scale = self.settings['climate_feature_scale_blocks']
        return float(noise.perlin_noise_at(
            self._p, (x + seed_offset) / scale, (y + seed_offset) / scale,
            self.settings['climate_noise_octaves'],
            self.settings['climate_noise_persistence'],
            self.settings['climate_noise_lacunarity']
        ))

    def sample_temperature(self, index: int, position: tuple[float, float]):
        """Climate noise for land chunks; None for ocean chunks."""
        return self._sample_climate(index, position, self.settings['temp_seed_offset'])

    def sample_humidity(self, index: int, position: tuple[float, float]):
        """Climate noise for land chunks; None for ocean chunks."""
        return self._sample_climate(index, position, self.settings['humidity_seed_offset'])

    # --- Uniformized Channels ---

    def uniformize_channel(self, name: str) -> np.ndarray:
        """Returns the (cached) InverseCdf of one of the world's channels."""
        if name not in DEFAULTS.UNIFORM_CHANNELS:
            raise ConfigurationError(
                f"Unknown channel '{name}', expected one of {DEFAULTS.UNIFORM_CHANNELS}"
            )
        if name not in self._inverse_cdfs:
            sample_fn = {
                'altitude': self.sample_altitude,
                'temperature': self.sample_temperature,
                'humidity': self.sample_humidity,
            }[name]
            start_time = time.perf_counter()
            self._inverse_cdfs[name] = uniform_noise(self.grid, sample_fn, self.cell_size)
            elapsed = time.perf_counter() - start_time
            self.logger.info(f"Uniformized '{name}' channel over {self.grid.size} chunks in {elapsed:.2f}s.")
        return self._inverse_cdfs[name]

    def land_mask(self) -> np.ndarray:
        """Flat boolean mask of chunks at or above sea level."""
        if self._land_mask is None:
            altitude = fractions(self.uniformize_channel('altitude'))
            self._land_mask = altitude >= self.settings['sea_level_fraction']
            self.logger.debug(f"{int(self._land_mask.sum())} of {self.grid.size} chunks are land.")
        return self._land_mask

    def _land_altitude(self) -> np.ndarray:
        # Re-rank altitude among land chunks only, so it is uniform over land.
        altitude = values(self.uniformize_channel('altitude'))
        return fractions(uniformize_field(altitude, self.land_mask()))

    def _combine_with_altitude(self, channel: str, noise_weight: float, altitude_weight: float) -> np.ndarray:
        """
        Re-uniformizes noise_weight * channel + altitude_weight * (1 - altitude)
        over land chunks. Higher ground is colder and drier. Ocean chunks are 0.
        """
        land = self.land_mask()
        combined = np.zeros(self.grid.size, dtype=np.float64)
        channel_fraction = fractions(self.uniformize_channel(channel))[land]
        inverted_altitude = 1.0 - self._land_altitude()[land]
        combined[land] = uniformize_weighted_sum(
            [noise_weight, altitude_weight],
            np.stack([channel_fraction, inverted_altitude])
        )
        overshoot = max(-combined.min(), combined.max() - 1.0)
        if overshoot > DEFAULTS.CDF_TOLERANCE:
            self.logger.warning(f"Combined '{channel}' CDF left [0, 1] by {overshoot:.3e}; clipping.")
        return np.clip(combined, 0.0, 1.0)

    def get_temperature(self) -> np.ndarray:
        """Uniform temperature attribute per chunk (flat array)."""
        return self._combine_with_altitude(
            'temperature',
            self.settings['temperature_noise_weight'],
            self.settings['temperature_altitude_weight']
        )

    def get_humidity(self) -> np.ndarray:
        """Uniform humidity attribute per chunk (flat array)."""
        return self._combine_with_altitude(
            'humidity',
            self.settings['humidity_noise_weight'],
            self.settings['humidity_altitude_weight']
        )

    def generate(self) -> dict:
        """
        Generates every channel and derived attribute, each reshaped to the
        (height, width) layout of the grid.
        """
        maps = {}
        for name in DEFAULTS.UNIFORM_CHANNELS:
            maps[name] = fractions(self.uniformize_channel(name)).reshape(self.grid.shape)
        maps['land'] = self.land_mask().reshape(self.grid.shape)
        maps['temperature_combined'] = self.get_temperature().reshape(self.grid.shape)
        maps['humidity_combined'] = self.get_humidity().reshape(self.grid.shape)
        return maps
