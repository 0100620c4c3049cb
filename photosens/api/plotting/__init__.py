"""
Plotting functions
"""

from photosens.api.plotting.basic import (
    simple_plotting_function,
    sensitivity_plot,
    population_plot,
)

__all__ = [
    'simple_plotting_function',
    'sensitivity_plot',
    'population_plot',
]
