"""B2B hourly rate / salary conversion calculator."""

__version__ = "0.1.0"
