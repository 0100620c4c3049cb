"""
Monte Carlo resampling of observer sensitivities
"""

from numbers import Integral
from typing import List, Optional

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm import tqdm

from photosens.api.assemble import MATRIX_NAMES, SensitivityBundle, assemble_bundle
from photosens.api.defaults import (
    DEFAULT_ALGORITHM,
    DEFAULT_N_SAMPLES,
    DEFAULT_SEED,
    PROGRESS_STEP,
    RECEPTOR_CLASSES,
)
from photosens.api.domain import as_sampling
from photosens.api.sampling import StreamBank, check_algorithm, sample_population_params
from photosens.err import InvalidConfigurationError, TransformError


class ResampledPopulation:
    """
    Ordered sequence of sensitivity bundles, one per resampled observer.

    Parameters
    ----------
    bundles : list of SensitivityBundle
        Bundles in draw order.
    sampling : WavelengthSampling
        Wavelength sampling shared by all bundles.
    algorithm : str, optional
        Random stream algorithm of the run.
    entropy : int, optional
        Entropy of the seed sequence of the run.
    """

    def __init__(self, bundles: List[SensitivityBundle], sampling, algorithm=None, entropy=None):
        self._bundles = tuple(bundles)
        self.sampling = as_sampling(sampling)
        self.algorithm = algorithm
        self.entropy = entropy

    def __len__(self):
        return len(self._bundles)

    def __iter__(self):
        return iter(self._bundles)

    def __getitem__(self, key):
        return self._bundles[key]

    def __repr__(self):
        return (
            f"{type(self).__name__}(n_samples={len(self)}, "
            f"sampling={self.sampling!r}, algorithm={self.algorithm!r})"
        )

    @property
    def labels(self):
        return self._bundles[0].labels if self._bundles else ()

    def stack(self, name="energy_normalized"):
        """
        Stack one representation across draws.

        Parameters
        ----------
        name : str, optional
            One of `MATRIX_NAMES`, by default 'energy_normalized'.

        Returns
        -------
        np.ndarray of shape (n_samples, n_receptors, n_wls)
        """
        if name not in MATRIX_NAMES:
            raise KeyError(f"`name` must be one of {MATRIX_NAMES}, got {name!r}.")
        return np.stack([getattr(bundle, name) for bundle in self._bundles])

    def params_frame(self, adjusted=False):
        """
        Individual difference parameters as a `pandas.DataFrame`.

        Parameters
        ----------
        adjusted : bool, optional
            Whether to return the clamped parameters used by the transform.

        Returns
        -------
        df : `pandas.DataFrame`
            One row per draw and receptor class with columns
                * `draw`
                * `receptor_class`
                * `dlens`
                * `dmac`
                * `dphotopigment`
                * `lambda_max_shift`
            The last two hold one value per pigment of the class.
        """
        records = []
        for draw, bundle in enumerate(self._bundles, 1):
            params = bundle.adjusted_params if adjusted else bundle.ind_diff_params
            for receptor_class in RECEPTOR_CLASSES:
                record = params[receptor_class].to_dict()
                record.pop('shift_type')
                record['dphotopigment'] = record['dphotopigment'].tolist()
                record['lambda_max_shift'] = record['lambda_max_shift'].tolist()
                records.append({'draw': draw, 'receptor_class': receptor_class, **record})
        return pd.DataFrame(records)

    def to_frame(self, name="energy_normalized"):
        """
        Long-format `pandas.DataFrame` of one representation.

        Returns
        -------
        df : `pandas.DataFrame`
            Columns `draw`, `receptor`, `wavelengths`, and `value`.
        """
        values = self.stack(name)
        n_samples, n_receptors, n_wls = values.shape
        index = pd.MultiIndex.from_product(
            [np.arange(1, n_samples + 1), list(self.labels), self.sampling.wavelengths],
            names=['draw', 'receptor', 'wavelengths'],
        )
        return pd.Series(values.ravel(), index=index, name='value').reset_index()


def check_n_samples(n_samples):
    """
    Raise `InvalidConfigurationError` unless `n_samples` is a positive integer.
    """
    if isinstance(n_samples, bool) or not isinstance(n_samples, Integral):
        raise InvalidConfigurationError(
            f"`n_samples` must be an integer, got {n_samples!r}."
        )
    if n_samples < 1:
        raise InvalidConfigurationError(
            f"`n_samples` must be at least 1, got {n_samples}."
        )


def _assemble_draw(draw_index, sampling, field_size, age, pupil_diameter, params, transforms):
    try:
        return assemble_bundle(
            sampling, field_size, age, pupil_diameter, params, transforms=transforms
        )
    except Exception as exc:
        raise TransformError(
            f"{type(exc).__name__}: {exc}", draw_index=draw_index
        ) from exc


def resample(
    sampling,
    field_size: float,
    age: float,
    pupil_diameter: float,
    n_samples: int = DEFAULT_N_SAMPLES,
    algorithm: str = DEFAULT_ALGORITHM,
    seed: Optional[int] = DEFAULT_SEED,
    verbose: bool = False,
    n_jobs: Optional[int] = None,
    transforms=None,
) -> ResampledPopulation:
    """
    Resample observer sensitivities from the population variability
    of the individual difference parameters.

    Parameters
    ----------
    sampling : WavelengthSampling or (start, step, count)
        Wavelength sampling.
    field_size : float
        Field size in degrees.
    age : float
        Observer age in years.
    pupil_diameter : float
        Pupil diameter in mm.
    n_samples : int, optional
        Number of observers to draw, by default 1000.
    algorithm : str, optional
        Random stream algorithm, by default 'mrg32k3a'.
    seed : int, optional
        Seed of the stream bank, by default 0.
    verbose : bool, optional
        Whether to show a progress bar, by default False.
    n_jobs : int, optional
        If given, assemble draws in parallel with joblib. The parameters of
        all draws are sampled beforehand, so the result does not depend
        on `n_jobs`.
    transforms : dict, optional
        Transform for each receptor class, see `assemble_bundle`.

    Returns
    -------
    ResampledPopulation

    Raises
    ------
    InvalidConfigurationError
        If `n_samples`, `algorithm` or `seed` are invalid. Nothing is sampled.
    TransformError
        If the sensitivities of a draw cannot be computed. The error names
        the 1-based draw index and the run is discarded.
    """
    check_n_samples(n_samples)
    check_algorithm(algorithm)
    sampling = as_sampling(sampling)

    streams = StreamBank(algorithm, seed)
    population_params = sample_population_params(streams, n_samples)

    iterator = tqdm(
        enumerate(population_params, 1),
        desc="Resampling observers",
        total=n_samples,
        disable=not verbose,
        miniters=PROGRESS_STEP,
        mininterval=0,
    )
    args = (sampling, field_size, age, pupil_diameter)
    if n_jobs is None:
        bundles = [
            _assemble_draw(idx, *args, params, transforms)
            for idx, params in iterator
        ]
    else:
        bundles = Parallel(n_jobs=n_jobs)(
            delayed(_assemble_draw)(idx, *args, params, transforms)
            for idx, params in iterator
        )
    return ResampledPopulation(bundles, sampling, streams.algorithm, streams.entropy)
