"""
Main API functions and classes
"""

from photosens.api.domain import WavelengthSampling
from photosens.api.params import IndDiffParams
from photosens.api.observer import (
    compute_cone_fundamentals,
    compute_melanopsin_fundamental,
    compute_rod_fundamental,
    HUMAN_TRANSFORMS,
)
from photosens.api.units.convert import quantal_to_energy, peak_normalize
from photosens.api.sampling import StreamBank, sample_ind_diff_params
from photosens.api.assemble import SensitivityBundle, assemble_bundle
from photosens.api.resampling import ResampledPopulation, resample
from photosens.api.parametric import ParametricVariation, parametric_variation


__all__ = [
    'WavelengthSampling',
    'IndDiffParams',
    'compute_cone_fundamentals',
    'compute_melanopsin_fundamental',
    'compute_rod_fundamental',
    'HUMAN_TRANSFORMS',
    'quantal_to_energy',
    'peak_normalize',
    'StreamBank',
    'sample_ind_diff_params',
    'SensitivityBundle',
    'assemble_bundle',
    'ResampledPopulation',
    'resample',
    'ParametricVariation',
    'parametric_variation',
]
