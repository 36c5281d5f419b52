"""
scene_emulator.motion
---------------------
Camera motion models (hand-shake jitter).
"""
