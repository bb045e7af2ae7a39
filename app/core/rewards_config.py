"""
Reward points configuration.

Every recorded activity earns the same amount, whatever its type, quantity
or emission sign.
"""

POINTS_PER_ACTIVITY = 10
