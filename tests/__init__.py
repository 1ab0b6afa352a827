"""Test package for 白Guessr.

Core tests exercise the pure color/score/field/viewport/timer modules and
the two round engines; headless sims script whole games with a fake clock.
UI smoke tests use pygame's dummy video driver. Run ``pytest`` from the
project root.
"""
