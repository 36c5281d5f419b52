"""
scene_emulator.utils
--------------------
Logging setup and matplotlib diagnostics (daylight curve, colour table).
"""
