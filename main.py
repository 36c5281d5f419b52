"""
Emulated scene demo:
day sweep -> colour table at an hour -> rotated readout -> plots & saves

Module contracts (refresher):
- scene_emulator.illumination.illumination_model.compute_illumination(hour, time_ns) -> IlluminationState
- scene_emulator.sensor.color_projector.project_palette(state, filters, sensitivity, exposure_s) -> (11, 4) electrons
- scene_emulator.scenes.scene_generator.generate_scene(kind, width, height) -> SceneBitmap
- scene_emulator.scene_model.EmulatedScene:
    - calculate_scene(time_ns, handshake_divider)
    - set_readout_pixel(x, y) / get_pixel_electrons() -> (R, Gr, Gb, B)

Run:
  python main.py
  python main.py --hour 18 --scene checker --screen_rotation 90 --outdir outputs
  python main.py --live_url http://127.0.0.1:8080/frame.raw   # raw passthrough
"""

import argparse
import logging
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt

from scene_emulator.config import SceneConfig
from scene_emulator.scene_model import EmulatedScene
from scene_emulator.scenes.scene_generator import generate_scene
from scene_emulator.utils.logging_config import setup_logging
from scene_emulator.utils.plots import daylight_curve, plot_color_table, plot_daylight_curve, show_bitmap


def run_demo(
    hour: int = 12,
    scene_kind: str = "slanted_edge",
    scene_size: tuple[int, int] = (320, 240),
    screen_rotation: int = 0,
    sensor_orientation: int = 0,
    front_facing: bool = False,
    exposure_s: float = 0.033,
    sensitivity: float = 100.0,
    live_url: str | None = None,
    outdir: str | Path = "outputs",
):
    """
    One frame of the emulated scene, plus a day-long illumination sweep.

    Saves:
      daylight_curve.png, color_table.png, active_scene.png
      color_table.npy, readout_row0.npy
    """
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    cfg = SceneConfig.from_env(
        hour=hour,
        screen_rotation=screen_rotation,
        sensor_orientation=sensor_orientation,
        is_front_facing=front_facing,
        exposure_duration_s=exposure_s,
        sensor_sensitivity=sensitivity,
        live_url=live_url,
    )
    canonical = generate_scene(scene_kind, width=scene_size[0], height=scene_size[1])

    with EmulatedScene(cfg, scene=canonical) as scene:
        # --- 1) One frame ------------------------------------------------------
        scene.calculate_scene(time_ns=0, handshake_divider=0)

        # --- 2) Read the first row the way the sensor pipeline would ----------
        bitmap = scene.active_scene
        row = np.empty((bitmap.width, 4), dtype=np.uint32)
        for x in range(bitmap.width):
            scene.set_readout_pixel(x, 0)
            row[x] = scene.get_pixel_electrons()

        # --- 3) Plots / saves --------------------------------------------------
        fig = plot_daylight_curve(daylight_curve(samples_per_hour=8))
        fig.savefig(outdir / "daylight_curve.png", dpi=150)

        fig = plot_color_table(scene.color_table, title=f"Material electrons @ {scene.get_hour():02d}:00")
        fig.savefig(outdir / "color_table.png", dpi=150)

        fig = show_bitmap(bitmap, title=f"Active scene ({scene.scene_rotation} deg)")
        fig.savefig(outdir / "active_scene.png", dpi=150)
        plt.close("all")

        np.save(outdir / "color_table.npy", np.asarray(scene.color_table))
        np.save(outdir / "readout_row0.npy", row)

        mode = "live" if scene.is_live_frame else "procedural"
        print(f"[OK] Saved outputs to: {outdir.resolve()}")
        print(f"Mode: {mode} | rotation {scene.scene_rotation} deg | "
              f"handshake ({scene.handshake[0]:.3f}, {scene.handshake[1]:.3f}) px")


# -----------------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------------

def parse_args():
    p = argparse.ArgumentParser(description="Emulated camera scene: illumination -> colour table -> readout")
    p.add_argument("--hour", type=int, default=12, help="simulated hour of day (0..23)")
    p.add_argument("--scene", default="slanted_edge",
                   help="canonical scene: blank, slanted_edge, barcode, gradient, siemens_star, checker")
    p.add_argument("--scene_width", type=int, default=320, help="scene width (pixels)")
    p.add_argument("--scene_height", type=int, default=240, help="scene height (pixels)")
    p.add_argument("--screen_rotation", type=int, default=0, help="screen rotation (degrees)")
    p.add_argument("--sensor_orientation", type=int, default=0, help="sensor mounting (0/90/180/270)")
    p.add_argument("--front_facing", action="store_true", help="front-facing (mirrored) camera")
    p.add_argument("--exposure", type=float, default=0.033, help="exposure duration (seconds)")
    p.add_argument("--sensitivity", type=float, default=100.0, help="sensor sensitivity")
    p.add_argument("--live_url", default=None, help="fetch raw scene bytes from this URL instead")
    p.add_argument("--outdir", default="outputs", help="output directory")
    p.add_argument("--verbose", action="store_true", help="log per-frame values")
    return p.parse_args()


if __name__ == "__main__":
    args = parse_args()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    run_demo(
        hour=args.hour,
        scene_kind=args.scene,
        scene_size=(args.scene_width, args.scene_height),
        screen_rotation=args.screen_rotation,
        sensor_orientation=args.sensor_orientation,
        front_facing=args.front_facing,
        exposure_s=args.exposure,
        sensitivity=args.sensitivity,
        live_url=args.live_url,
        outdir=args.outdir,
    )

#Solar noon, landscape
#python main.py --hour 12

#Sunset colour shift
#python main.py --hour 18 --scene checker

#Portrait device, back camera mounted at 90 degrees
#python main.py --screen_rotation 90 --sensor_orientation 90

#Night, debug logging of every illuminant
#python main.py --hour 0 --verbose
