"""Domain enumerations and constants."""
