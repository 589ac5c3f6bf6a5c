"""
sgtorch: Skew Generalized T densities and reference test posteriors in PyTorch.

A PyTorch-based library for evaluating the Skew Generalized T family (log-density,
log-CDF, quantiles and sampling, with the Skew-T and Generalized-T special cases)
and for the synthetic test posteriors used to validate inference algorithms.
"""

__version__ = "0.1.0"

# Import main classes for easy access
from .errors import DomainError
from .distributions.skew_generalized_t import (
    SkewGeneralizedT,
    generalized_t_log_density,
    mean_centered_shift,
    skew_generalized_t_log_cdf,
    skew_generalized_t_log_density,
    skew_t_log_density,
    variance_adjusted_scale,
)
from .models.base import ReferencePosterior, ReferenceSamplingConfig, posterior_name
from .models.skew_t import SkewTPosterior
from .models.laplace import LaplacePosterior, HeavyLightTailPosterior
from .models.neals_funnel import NealsFunnelPosterior

# Re-export main functionality
__all__ = [
    "DomainError",
    "SkewGeneralizedT",
    "variance_adjusted_scale",
    "mean_centered_shift",
    "skew_generalized_t_log_density",
    "skew_t_log_density",
    "generalized_t_log_density",
    "skew_generalized_t_log_cdf",
    "ReferencePosterior",
    "ReferenceSamplingConfig",
    "posterior_name",
    "SkewTPosterior",
    "LaplacePosterior",
    "HeavyLightTailPosterior",
    "NealsFunnelPosterior",
]
