from . import checks
from . import precision
from . import apnum
from . import fpwrap
from . import constants
from . import elementary
from . import roots
from . import agm
from . import acb_core
from . import arb_core
from . import series_utils
from . import combinatorics
from . import bernoulli
from . import gamma
from . import dirichlet
from . import hypgeom
from . import incgamma
from . import erf
from . import expint
from . import bessel
from . import acb_elliptic
from . import orthopoly
from . import polylog
from . import lambertw
from . import parallel
from . import fixed_precision
from . import validation

from .apnum import Complex, Float, cpx, real
from .checks import ApfloatError, DomainError, InfiniteExpansionError, LossOfPrecisionError
from .fixed_precision import FixedPrecision

__all__ = [
    "checks",
    "precision",
    "apnum",
    "fpwrap",
    "constants",
    "elementary",
    "roots",
    "agm",
    "acb_core",
    "arb_core",
    "series_utils",
    "combinatorics",
    "bernoulli",
    "gamma",
    "dirichlet",
    "hypgeom",
    "incgamma",
    "erf",
    "expint",
    "bessel",
    "acb_elliptic",
    "orthopoly",
    "polylog",
    "lambertw",
    "parallel",
    "fixed_precision",
    "validation",
    "Complex",
    "Float",
    "cpx",
    "real",
    "ApfloatError",
    "DomainError",
    "InfiniteExpansionError",
    "LossOfPrecisionError",
    "FixedPrecision",
]
