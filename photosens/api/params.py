"""
Individual difference parameters of an observer
"""

import numpy as np


class IndDiffParams:
    """
    Deviations of one receptor class from the standard observer.

    Parameters
    ----------
    dlens : float, optional
        Deviation in % from the standard peak lens density.
    dmac : float, optional
        Deviation in % from the standard peak macular pigment density.
    dphotopigment : float or array-like, optional
        Deviation in % from the standard peak photopigment density,
        one value per pigment of the receptor class.
    lambda_max_shift : float or array-like, optional
        Shift in nm of the absorbance peak of each pigment.
    shift_type : {'linear', 'log'} or None, optional
        How `lambda_max_shift` is applied. Only meaningful for cones.
    """

    def __init__(
        self,
        dlens=0.0,
        dmac=0.0,
        dphotopigment=0.0,
        lambda_max_shift=0.0,
        shift_type=None,
    ):
        self.dlens = float(dlens)
        self.dmac = float(dmac)
        self.dphotopigment = np.atleast_1d(np.asarray(dphotopigment, dtype=float))
        self.lambda_max_shift = np.atleast_1d(np.asarray(lambda_max_shift, dtype=float))
        self.shift_type = shift_type

    @classmethod
    def zeros(cls, n_pigments=1, shift_type=None):
        """Parameters of the standard observer."""
        return cls(
            dphotopigment=np.zeros(n_pigments),
            lambda_max_shift=np.zeros(n_pigments),
            shift_type=shift_type,
        )

    @property
    def n_pigments(self):
        return self.dphotopigment.size

    def copy(self):
        return type(self)(**self.to_dict())

    def to_dict(self):
        return {
            'dlens': self.dlens,
            'dmac': self.dmac,
            'dphotopigment': self.dphotopigment.copy(),
            'lambda_max_shift': self.lambda_max_shift.copy(),
            'shift_type': self.shift_type,
        }

    def __eq__(self, other):
        if not isinstance(other, IndDiffParams):
            return NotImplemented
        return (
            self.dlens == other.dlens
            and self.dmac == other.dmac
            and np.array_equal(self.dphotopigment, other.dphotopigment)
            and np.array_equal(self.lambda_max_shift, other.lambda_max_shift)
            and self.shift_type == other.shift_type
        )

    def __repr__(self):
        return (
            f"{type(self).__name__}(dlens={self.dlens!r}, dmac={self.dmac!r}, "
            f"dphotopigment={self.dphotopigment.tolist()!r}, "
            f"lambda_max_shift={self.lambda_max_shift.tolist()!r}, "
            f"shift_type={self.shift_type!r})"
        )


def nominal_ind_diff_params(n_cones=3):
    """
    Standard observer parameters for the 'cones', 'melanopsin' and 'rod' classes.
    """
    return {
        'cones': IndDiffParams.zeros(n_cones, shift_type='linear'),
        'melanopsin': IndDiffParams.zeros(1),
        'rod': IndDiffParams.zeros(1),
    }
