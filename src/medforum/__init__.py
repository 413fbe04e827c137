"""Comment threads, vote scoring and karma for the medforum community platform."""

__version__ = "0.1.0"
