"""
Receptor objects
"""

from photosens.core.receptor import BaseReceptor, HumanReceptor

__all__ = [
    'BaseReceptor',
    'HumanReceptor',
]
