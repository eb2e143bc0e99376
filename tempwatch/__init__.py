"""Four-channel temperature monitoring with hysteresis states and JSON reporting over HTTP."""

__version__ = "0.1.0"