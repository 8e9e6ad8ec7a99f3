"""
Ainimo - progression engine for a virtual companion.

The companion's attributes change through player actions, decay over real
time, shape an emergent personality, unlock achievements and feed four
mini-games. Engine functions live in ``ainimo.systems`` and are pure
reducers; ``ainimo.state`` holds the models and the manager that commits
their results.
"""

__version__ = "1.0.0"
