"""Domain and IO models."""
