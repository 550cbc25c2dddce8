"""Domain layer for saxopoint

Immutable snapshots of provider entities. No infrastructure dependencies.
"""

from . import models

__all__ = ["models"]
