# bake_uniform.py

"""
================================================================================
UNIFORM CHANNEL BAKER SCRIPT
================================================================================
This script is a command-line tool for generating every uniformized channel of
a world and writing grayscale previews plus a uniformity report, so the
distribution of each channel can be inspected before it feeds into terrain
generation.

Usage:
    python bake_uniform.py --config path/to/your/config.json --output out_dir
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import numpy as np
from PIL import Image
from tqdm import tqdm

# Add project root to Python path to allow importing from uniform_worldgen
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from uniform_worldgen.channels import UniformWorld
from uniform_worldgen import config as DEFAULTS
from uniform_worldgen import diagnostics


def save_preview(fraction_map: np.ndarray, directory: str, name: str) -> str:
    """
    Saves a (height, width) map of values in [0, 1] as an 8-bit grayscale PNG.
    """
    os.makedirs(directory, exist_ok=True)
    file_path = os.path.join(directory, f"{name}.png")
    pixels = np.round(np.clip(fraction_map, 0.0, 1.0) * 255).astype(np.uint8)
    Image.fromarray(pixels, 'L').save(file_path, 'PNG')
    return file_path


def bake_uniform(config_path: str, output_dir: str, logger: logging.Logger = None) -> dict:
    """
    Loads a configuration, generates all uniform channels and saves previews,
    the uniformity report and the consolidated generation settings.

    Returns the uniformity report, or None if the config could not be loaded.
    """
    logger = logger or logging.getLogger("UniformBaker")

    # 1. --- Load Configuration ---
    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None

    world_params = config.get('world_generation_parameters', {})

    # 2. --- Initialize the World ---
    world = UniformWorld(config=world_params, logger=logger)
    start_time = time.perf_counter()

    # 3. --- Uniformize Every Channel ---
    report = {}
    for name in tqdm(DEFAULTS.UNIFORM_CHANNELS, desc="Uniformizing Channels"):
        inverse_cdf = world.uniformize_channel(name)
        report[name] = diagnostics.uniformity_report(inverse_cdf)
        logger.debug(f"{name} fraction histogram: {report[name]['histogram']}")

    # 4. --- Derived Attributes & Previews ---
    os.makedirs(output_dir, exist_ok=True)
    maps = world.generate()
    for name, data in maps.items():
        save_preview(data.astype(np.float64), output_dir, name)

    # --- Finalization ---
    with open(os.path.join(output_dir, "uniformity_report.json"), 'w') as f:
        json.dump(report, f, indent=2)
    with open(os.path.join(output_dir, "generation_config.json"), 'w') as f:
        json.dump(world.settings, f, indent=4)

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info("--- Channel Uniformity ---")
    for name, stats in report.items():
        if stats['present_count'] == 0:
            logger.warning(f"  - {name.capitalize()}: no present samples.")
            continue
        logger.info(
            f"  - {name.capitalize()}: {stats['present_count']} ranked, {stats['absent_count']} absent, "
            f"KS distance {stats['ks_statistic']:.4f}"
        )
    logger.info(f"Previews and report saved to: {output_dir}")
    return report


# --- Command-Line Interface ---
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    parser = argparse.ArgumentParser(description="Uniform channel baker for procedural world generation.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file for the world."
    )
    parser.add_argument(
        "--output",
        type=str,
        default="baked_uniform",
        help="Directory that receives the previews and the report."
    )
    args = parser.parse_args()

    bake_uniform(args.config, args.output)
