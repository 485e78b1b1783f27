"""Trading journal analytics.

Turns a snapshot of trade documents into dashboard statistics: PnL,
win rate, drawdown, streaks, strategy and calendar breakdowns.
"""

__version__ = "0.1.0"
