"""
scene_emulator.sensor
---------------------
Sensor-side view of the scene:
    lit material XYZ -> RGGB electrons (colour projector), and the readout
    cursor the external sensor pipeline polls pixel by pixel.
"""
