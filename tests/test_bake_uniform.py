import json

import numpy as np
import pytest
from PIL import Image

from bake_uniform import bake_uniform, save_preview


@pytest.fixture
def config_file(tmp_path, small_world_config):
    path = tmp_path / "world.json"
    path.write_text(json.dumps({"world_generation_parameters": small_world_config}))
    return path


def test_bake_writes_previews_and_report(tmp_path, config_file, logger) -> None:
    output_dir = tmp_path / "out"
    report = bake_uniform(str(config_file), str(output_dir), logger)

    assert set(report) == {"altitude", "temperature", "humidity"}
    assert report["altitude"]["present_count"] == 108
    assert report["altitude"]["absent_count"] == 0
    assert report["temperature"]["absent_count"] > 0
    assert len(report["altitude"]["histogram"]) == 10
    assert sum(report["altitude"]["histogram"]) == 108
    assert sum(report["temperature"]["histogram"]) == report["temperature"]["present_count"]

    for name in ("altitude", "temperature", "humidity", "land", "temperature_combined", "humidity_combined"):
        with Image.open(output_dir / f"{name}.png") as img:
            assert img.mode == "L"
            assert img.size == (12, 9)

    saved_report = json.loads((output_dir / "uniformity_report.json").read_text())
    assert saved_report == report
    settings = json.loads((output_dir / "generation_config.json").read_text())
    assert settings["seed"] == 42
    assert settings["world_width_chunks"] == 12


def test_bake_aborts_on_missing_config(tmp_path, logger) -> None:
    output_dir = tmp_path / "out"
    assert bake_uniform(str(tmp_path / "missing.json"), str(output_dir), logger) is None
    assert not output_dir.exists()


def test_bake_aborts_on_invalid_json(tmp_path, logger) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    assert bake_uniform(str(path), str(tmp_path / "out"), logger) is None


def test_save_preview_maps_unit_range_to_bytes(tmp_path) -> None:
    path = save_preview(np.array([[0.0, 0.5], [1.0, 2.0]]), str(tmp_path), "ramp")
    with Image.open(path) as img:
        pixels = np.array(img)
    assert pixels.tolist() == [[0, 128], [255, 255]]
