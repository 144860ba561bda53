"""
API input/output schemas.

These schemas are used for API serialization/deserialization and are separate
from the entity models to allow independent evolution of API contracts.
"""
