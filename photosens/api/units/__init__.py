"""
Unit handling and conversion
"""

from photosens.api.units.registry import ureg
from photosens.api.units.convert import (
    has_units,
    optional_to,
    quanta_per_energy,
    quantal_to_energy,
    peak_normalize,
)

__all__ = [
    'ureg',
    'has_units',
    'optional_to',
    'quanta_per_energy',
    'quantal_to_energy',
    'peak_normalize',
]
