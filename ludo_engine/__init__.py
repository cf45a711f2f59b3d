"""
Ludo Engine - Rules engine for a four-color race game

A deterministic, pure-function engine for Ludo on a shared 52-cell ring
with per-color home lanes. Provides:
- Board geometry and ring index math
- Legal move generation
- Move application with capture, extra turn and win detection
- In-memory rooms and an HTTP API around the engine
"""

__version__ = "0.1.0"
