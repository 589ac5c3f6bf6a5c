"""Probability distributions for benchmark posteriors."""

from .skew_generalized_t import (
    SkewGeneralizedT,
    generalized_t_log_density,
    mean_centered_shift,
    skew_generalized_t_log_cdf,
    skew_generalized_t_log_density,
    skew_t_log_density,
    variance_adjusted_scale,
)

__all__ = [
    "SkewGeneralizedT",
    "variance_adjusted_scale",
    "mean_centered_shift",
    "skew_generalized_t_log_density",
    "skew_t_log_density",
    "generalized_t_log_density",
    "skew_generalized_t_log_cdf",
]
