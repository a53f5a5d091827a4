"""Read IPM XML performance profiles and model CUBE 3 profile data."""

__version__ = "0.1.0"