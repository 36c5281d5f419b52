"""
scene_emulator.scenes
---------------------
What the camera looks at:
    material palette (xyY + lighting class), the canonical scene bitmap,
    its four precomputed rotations, and synthetic scene generators.
"""
