"""shiftclock - shift clock-in, break, and hours tracking."""

__version__ = "0.1.0"
