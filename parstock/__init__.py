"""Stock-take reconciliation and replenishment core."""

__version__ = "1.0.0"
