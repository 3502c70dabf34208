"""
Type definitions

Process-wide enums. Every Enum inherits from str so it serialises as a
plain string.
"""

from enum import Enum


class Environment(str, Enum):
    """Deployment environment (selects the database file)"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
