"""
scene_emulator.live
-------------------
External scene providers that replace the procedural scene with live bytes.
"""
