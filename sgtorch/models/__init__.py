"""Reference test posteriors for benchmarking inference algorithms."""

from .base import ReferencePosterior, ReferenceSamplingConfig, posterior_name
from .skew_t import SkewTPosterior
from .laplace import LaplacePosterior, HeavyLightTailPosterior
from .neals_funnel import NealsFunnelPosterior

__all__ = [
    "ReferencePosterior",
    "ReferenceSamplingConfig",
    "posterior_name",
    "SkewTPosterior",
    "LaplacePosterior",
    "HeavyLightTailPosterior",
    "NealsFunnelPosterior",
]
