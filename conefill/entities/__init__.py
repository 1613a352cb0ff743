"""
Entities Module
===============
Things that exist on the belt.

- Cone: Passive item carried by the belt
- Hose: The hose head that fills cones
"""

from .cone import Cone, ConeStatus
from .hose import Hose, HoseState, HoseMode

__all__ = [
    'Cone',
    'ConeStatus',
    'Hose',
    'HoseState',
    'HoseMode'
]
