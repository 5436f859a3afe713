"""Test package for the PRI trainer.

Unit tests cover the session engine (generators, timer, scoring, state
machine) and the stores. UI smoke tests run headlessly using pygame's dummy
video driver so no real window opens. Run ``pytest`` from the project root.
"""
