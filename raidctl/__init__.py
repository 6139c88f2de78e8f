"""Linux software RAID check control."""

__version__ = "0.1.0"
