"""
Sampling of individual difference parameters

Each parameter dimension owns one random stream. Within a draw, the lens
and macular values are taken once and shared by every receptor class, as
they are properties of the whole eye. All streams derive from a single
seed, so a run is reproducible from the algorithm name and the seed.
"""

from collections import OrderedDict
from typing import Dict, List, Optional

import numpy as np
from mrg32k3a.mrg32k3a import MRG32k3a
from numpy.random import Generator, SeedSequence

from photosens.api.defaults import (
    CONE_LABELS,
    DEFAULT_ALGORITHM,
    DEFAULT_SEED,
    DLENS_SD,
    DMAC_SD,
    DPHOTOPIGMENT_SD,
    LAMBDA_MAX_SHIFT_SD,
)
from photosens.api.params import IndDiffParams
from photosens.err import InvalidConfigurationError

MRG32K3A = "mrg32k3a"
# moduli of the two component recursions of MRG32k3a
MRG32K3A_MODULI = (4294967087, 4294944443)

BIT_GENERATORS = {
    "philox": np.random.Philox,
    "pcg64": np.random.PCG64,
    "pcg64dxsm": np.random.PCG64DXSM,
    "mt19937": np.random.MT19937,
    "sfc64": np.random.SFC64,
}
"""
Numpy bit generators usable as random stream algorithms.
"""

ALGORITHMS = (MRG32K3A,) + tuple(BIT_GENERATORS)
"""
Recognized random stream algorithms.
"""

STREAM_NAMES = (
    ("lens", "macula")
    + tuple(f"dphotopigment_{label}" for label in CONE_LABELS)
    + tuple(f"lambda_max_shift_{label}" for label in CONE_LABELS)
)
"""
Parameter dimensions in stream creation order.
"""


def check_algorithm(algorithm):
    """
    Return the normalized name of the random stream `algorithm`.

    Raises
    ------
    InvalidConfigurationError
        If `algorithm` is not a recognized name.
    """
    if isinstance(algorithm, str) and algorithm.lower() in ALGORITHMS:
        return algorithm.lower()
    raise InvalidConfigurationError(
        f"Unknown random stream algorithm {algorithm!r}; "
        f"choose one of {sorted(ALGORITHMS)}."
    )


def mrg32k3a_ref_seed(seed_sequence):
    """
    Reference seed of the MRG32k3a generator derived from `seed_sequence`.

    Each component lies in [1, m - 1] for the modulus m of its recursion,
    so neither state triplet can be all zero.
    """
    state = seed_sequence.generate_state(6, np.uint64)
    return tuple(
        1 + int(value) % (MRG32K3A_MODULI[idx // 3] - 1)
        for idx, value in enumerate(state)
    )


def _create_streams(algorithm, seed_sequence, n_streams):
    if algorithm == MRG32K3A:
        # streams 0..7 of one reference seed, split by jumping ahead
        ref_seed = mrg32k3a_ref_seed(seed_sequence)
        return [
            MRG32k3a(ref_seed=ref_seed, s_ss_sss_index=[idx, 0, 0])
            for idx in range(n_streams)
        ]
    bit_generator = BIT_GENERATORS[algorithm]
    return [Generator(bit_generator(child)) for child in seed_sequence.spawn(n_streams)]


class StreamBank:
    """
    Independent random streams, one per individual difference dimension.

    Parameters
    ----------
    algorithm : str, optional
        Name of the random stream algorithm, by default 'mrg32k3a'.
        Numpy bit generator names (see `BIT_GENERATORS`) are also accepted.
    seed : int, optional
        Seed shared by all streams, by default 0. If None, fresh entropy is
        drawn from the operating system; it is kept in `entropy` so that
        the run can be reproduced.
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM, seed: Optional[int] = DEFAULT_SEED):
        algorithm = check_algorithm(algorithm)
        try:
            seed_sequence = SeedSequence(seed)
        except (TypeError, ValueError) as exc:
            raise InvalidConfigurationError(f"Invalid seed {seed!r}: {exc}") from exc
        self.algorithm = algorithm
        self.entropy = seed_sequence.entropy
        self._streams = OrderedDict(
            zip(STREAM_NAMES, _create_streams(algorithm, seed_sequence, len(STREAM_NAMES)))
        )

    @property
    def names(self):
        return tuple(self._streams)

    def __getitem__(self, name):
        return self._streams[name]

    def __len__(self):
        return len(self._streams)

    def standard_normal(self, name) -> float:
        """Advance stream `name` by one standard normal value."""
        stream = self._streams[name]
        if self.algorithm == MRG32K3A:
            return float(stream.normalvariate(0, 1))
        return float(stream.standard_normal())


def sample_ind_diff_params(streams: StreamBank) -> Dict[str, IndDiffParams]:
    """
    Draw the individual difference parameters of one observer.

    Consumes exactly one value from each stream.

    Parameters
    ----------
    streams : StreamBank
        The stream bank of the current run.

    Returns
    -------
    dict
        Parameters for the 'cones', 'melanopsin' and 'rod' classes.
        Melanopsin and rod pigments are not resampled and keep zero
        photopigment and peak shift deviations.
    """
    dlens = streams.standard_normal("lens") * DLENS_SD
    dmac = streams.standard_normal("macula") * DMAC_SD
    dphotopigment = np.array([
        streams.standard_normal(f"dphotopigment_{label}") * sd
        for label, sd in zip(CONE_LABELS, DPHOTOPIGMENT_SD)
    ])
    lambda_max_shift = np.array([
        streams.standard_normal(f"lambda_max_shift_{label}") * sd
        for label, sd in zip(CONE_LABELS, LAMBDA_MAX_SHIFT_SD)
    ])
    return {
        "cones": IndDiffParams(dlens, dmac, dphotopigment, lambda_max_shift, "linear"),
        "melanopsin": IndDiffParams(dlens, dmac, 0.0, 0.0),
        "rod": IndDiffParams(dlens, dmac, 0.0, 0.0),
    }


def sample_population_params(streams: StreamBank, n_samples: int) -> List[Dict[str, IndDiffParams]]:
    """
    Draw `n_samples` parameter sets in draw order.
    """
    return [sample_ind_diff_params(streams) for _ in range(n_samples)]
