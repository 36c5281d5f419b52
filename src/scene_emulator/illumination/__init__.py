"""
scene_emulator.illumination
---------------------------
Ambient light over a simulated day:
    hour + time -> sun / moon / starlight (lux, xy) -> direct & shade XYZ.
"""
