"""
Default global variables
"""

DEFAULT_SAMPLING = (380.0, 2.0, 201)
"""
Wavelength sampling as (start, step, count) in nm.
"""

DEFAULT_AGE = 32.0
DEFAULT_PUPIL_DIAMETER = 3.0
DEFAULT_FIELD_SIZE = 10.0

RECEPTOR_LABELS = ("L", "M", "S", "Mel", "Rod")
"""
Row order shared by every sensitivity matrix.
"""
CONE_LABELS = RECEPTOR_LABELS[:3]
RECEPTOR_CLASSES = ("cones", "melanopsin", "rod")

# Standard deviations of the individual difference parameters,
# Table 5 of Asano et al. (2016), doi.org/10.1371/journal.pone.0145671.
# The macular pigment value is reduced from 36.5 to 25, since the
# literature value often drives the macular parameter out of bounds.
DLENS_SD = 18.7  # %
DMAC_SD = 25.0  # %
DPHOTOPIGMENT_SD = (9.0, 9.0, 7.4)  # % for L, M, S
LAMBDA_MAX_SHIFT_SD = (2.0, 1.5, 1.3)  # nm for L, M, S

DEFAULT_N_SAMPLES = 1000
DEFAULT_ALGORITHM = "mrg32k3a"
DEFAULT_SEED = 0
PROGRESS_STEP = 200
