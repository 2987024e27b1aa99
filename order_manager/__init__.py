"""Order Manager - orders and their items as one aggregate."""

__version__ = "1.0.0"
