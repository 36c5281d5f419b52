import logging

import numpy as np
import matplotlib.pyplot as plt

from scene_emulator.illumination.illumination_model import DIRECT_SUN_ILLUM, compute_illumination
from scene_emulator.scenes.scene_generator import generate_scene
from scene_emulator.sensor.color_projector import ColorFilterXYZ, project_palette
from scene_emulator.utils.logging_config import setup_logging
from scene_emulator.utils.plots import daylight_curve, plot_color_table, plot_daylight_curve, show_bitmap


def test_daylight_curve():
    curve = daylight_curve(samples_per_hour=2)
    assert curve["hour"].shape == (48,)
    assert curve["sun_lux"].max() == DIRECT_SUN_ILLUM
    assert curve["sun_lux"][0] == 0.0
    assert np.all(curve["direct_Y"] >= curve["shade_Y"] - 1e-9)


def test_plots_render(tmp_path):
    fig = plot_daylight_curve(daylight_curve(1))
    fig.savefig(tmp_path / "day.png")
    table = project_palette(compute_illumination(12), ColorFilterXYZ(), 100.0, 0.033)
    fig = plot_color_table(table)
    fig.savefig(tmp_path / "table.png")
    fig = show_bitmap(generate_scene("checker", 16, 16))
    fig.savefig(tmp_path / "scene.png")
    plt.close("all")
    assert all((tmp_path / n).stat().st_size > 0 for n in ("day.png", "table.png", "scene.png"))


def test_setup_logging(tmp_path):
    log_file = tmp_path / "scene.log"
    logger = setup_logging("debug", log_file=str(log_file))
    assert logger is logging.getLogger("scene_emulator")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    logging.getLogger("scene_emulator.scene_model").debug("frame computed")

    setup_logging(logging.INFO)
    assert len(logger.handlers) == 1
    text = log_file.read_text(encoding="utf-8")
    assert "at DEBUG" in text
    assert "[scene_emulator.scene_model] frame computed" in text

    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
