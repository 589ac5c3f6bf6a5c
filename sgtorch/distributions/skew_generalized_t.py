r"""
Skew Generalized T distribution (Theodossiou, 1998).

The density of the residual \(r = x + m - \mu\) is
\[
  f(r) = \frac{p}{2\,\sigma_a\,q^{1/p}\,B(1/p,\,q)
         \left(1 + \dfrac{|r|^p}{q\,\sigma_a^p\,(1+\lambda\,\mathrm{sign}(r))^p}\right)^{1/p+q}},
\]
where \(\sigma_a\) is the variance-adjusted scale and \(m\) the mean-centering
shift, so that \(\mathbb{E}[X]=\mu\) and \(\mathrm{Var}[X]=\sigma^2\).
Letting \(q\to\infty\) gives the skewed generalized error distribution and
\(p\to\infty\) a (skewed) uniform.
"""

import math

import numpy as np
import torch
from scipy import stats
from scipy.special import betaln, gammaln

from ..errors import reject
from ..utils.torch_utils import TensorLike, as_tensor, get_best_device

LOG2 = math.log(2.0)


# ------------------------ parameter checks ------------------------

def _check_parameters(sigma: float, lam: float, p: float, q: float) -> None:
    # written as `not ... > 0` so that NaN fails too
    if not sigma > 0:
        raise reject("sigma", sigma, "positive")
    if not -1.0 < lam < 1.0:
        raise reject("lambda", lam, "in (-1, 1)")
    if not p > 0:
        raise reject("p", p, "positive")
    if not q > 0:
        raise reject("q", q, "positive")


def _check_variance_parameters(sigma: float, lam: float, p: float, q: float) -> None:
    _check_parameters(sigma, lam, p, q)
    if not p * q > 2:
        raise reject("p * q", p * q, "greater than 2")


# ------------------------ scale and location transforms ------------------------

def variance_adjusted_scale(
    sigma: float, lam: float, p: float = 2.0, q: float = math.inf
) -> float:
    r"""
    Scale \(\sigma_a\) for which the distribution has standard deviation ``sigma``.

    \[
      \sigma_a = \frac{\sigma}{q^{1/p}\sqrt{(3\lambda^2+1)\dfrac{B(3/p,\,q-2/p)}{B(1/p,\,q)}
                 - 4\lambda^2\left(\dfrac{B(2/p,\,q-1/p)}{B(1/p,\,q)}\right)^2}}
    \]
    with the Gamma function limit for \(q=\infty\) and \(\sigma\sqrt{3}\) for
    \(p=\infty\).

    Raises
    ------
    DomainError
        If a base parameter is invalid or \(pq \le 2\) (infinite variance).
    """
    _check_variance_parameters(sigma, lam, p, q)
    return _scale(sigma, lam, p, q)


def _scale(sigma: float, lam: float, p: float, q: float) -> float:
    if math.isinf(p):
        return sigma * math.sqrt(3.0)

    lam2 = lam * lam
    if math.isinf(q):
        m2 = math.exp(gammaln(3.0 / p) - gammaln(1.0 / p))
        m1 = math.exp(gammaln(2.0 / p) - gammaln(1.0 / p))
        return sigma / math.sqrt((1.0 + 3.0 * lam2) * m2 - 4.0 * lam2 * m1 * m1)

    lb = betaln(1.0 / p, q)
    m2 = math.exp(betaln(3.0 / p, q - 2.0 / p) - lb)
    m1 = math.exp(betaln(2.0 / p, q - 1.0 / p) - lb)
    return sigma / (
        q ** (1.0 / p) * math.sqrt((3.0 * lam2 + 1.0) * m2 - 4.0 * lam2 * m1 * m1)
    )


def _shift(sigma: float, lam: float, p: float, q: float) -> float:
    if math.isinf(p):
        return sigma * lam
    if math.isinf(q):
        return (
            2.0 ** (2.0 / p) * sigma * lam * math.exp(gammaln(0.5 + 1.0 / p))
            / math.sqrt(math.pi)
        )
    return (
        2.0 * sigma * lam * q ** (1.0 / p)
        * math.exp(betaln(2.0 / p, q - 1.0 / p) - betaln(1.0 / p, q))
    )


def mean_centered_shift(
    x: TensorLike, sigma: float, lam: float, p: float = 2.0, q: float = math.inf
):
    r"""
    Add the mean-centering shift
    \(m = 2\sigma\lambda q^{1/p} B(2/p,\,q-1/p) / B(1/p,\,q)\) to ``x``.

    ``x`` may be a tensor, array, sequence or scalar; tensors and arrays keep
    their shape, scalars come back as ``float``. Calling with ``q`` only
    (``mean_centered_shift(x, sigma, lam, q=q)``) uses the default shape
    ``p=2``.

    Raises
    ------
    DomainError
        If a base parameter is invalid or \(pq \le 1\) (no finite mean).
    """
    _check_parameters(sigma, lam, p, q)
    if not p * q > 1:
        raise reject("p * q", p * q, "greater than 1")

    m = _shift(sigma, lam, p, q)
    if isinstance(x, (torch.Tensor, np.ndarray)):
        return x + m
    arr = np.asarray(x, dtype=np.float64) + m
    return float(arr) if arr.ndim == 0 else arr


# ------------------------ density ------------------------

def _log_normalizer(sigma_adj: float, p: float, q: float) -> float:
    if math.isinf(p):
        return -math.log(2.0 * sigma_adj)
    if math.isinf(q):
        return math.log(p) - LOG2 - math.log(sigma_adj) - float(gammaln(1.0 / p))
    return (
        math.log(p) - LOG2 - math.log(sigma_adj) - math.log(q) / p
        - float(betaln(1.0 / p, q))
    )


def _standardized_distance(
    x: torch.Tensor, mu: float, sigma_adj: float, lam: float, p: float, q: float
) -> torch.Tensor:
    """|r| / (sigma_adj (1 + lam s)) for the centered residual r."""
    r = x + _shift(sigma_adj, lam, p, q) - mu
    # r == 0 takes the right-hand scale
    s = torch.ones_like(r).masked_fill(r < 0, -1.0)
    return r.abs() / (sigma_adj * (1.0 + lam * s))


def _log_kernel(z: torch.Tensor, p: float, q: float) -> torch.Tensor:
    if math.isinf(p):
        return torch.zeros_like(z).masked_fill(z > 1.0, math.inf)
    if math.isinf(q):
        return z ** p
    return (1.0 / p + q) * torch.log1p(z ** p / q)


def _log_uniform(x: torch.Tensor, mu: float, sigma_adj: float) -> torch.Tensor:
    outside = (x < mu - sigma_adj) | (x > mu + sigma_adj)
    return torch.full_like(x, -math.log(2.0 * sigma_adj)).masked_fill(outside, -math.inf)


def _log_density_terms(
    x: torch.Tensor, mu: float, sigma_adj: float, lam: float, p: float, q: float
) -> torch.Tensor:
    """Elementwise log-density; parameters are assumed valid."""
    if math.isinf(p) and math.isinf(q):
        return _log_uniform(x, mu, sigma_adj)
    z = _standardized_distance(x, mu, sigma_adj, lam, p, q)
    return _log_normalizer(sigma_adj, p, q) - _log_kernel(z, p, q)


def skew_generalized_t_log_density(
    x: TensorLike, mu: float, sigma: float, lam: float, p: float, q: float
) -> torch.Tensor:
    r"""
    Joint log-density of the entries of ``x`` as i.i.d. SGT draws.

    Parameters
    ----------
    x : tensor, array, sequence or float
        Observations; flattened to a vector of length N (N may be 0).
    mu : float
        Location (the mean of the distribution).
    sigma : float
        Standard deviation, \(\sigma>0\).
    lam : float
        Skewness \(\lambda\in(-1,1)\).
    p, q : float
        Kurtosis shapes, both \(>0\) and possibly ``math.inf``, with \(pq>2\).

    Returns
    -------
    torch.Tensor
        0-dim float64 tensor, differentiable with respect to ``x``.

    Notes
    -----
    For \(p=q=\infty\) the distribution is the Uniform on
    \([\mu-\sigma_a,\,\mu+\sigma_a]\), evaluated without centering. For
    \(q=\infty\) the result is
    \(N(\log p - \log 2 - \log\sigma_a - \log\Gamma(1/p)) - \sum_n z_n^p\),
    otherwise
    \[
      N\Big(\log p - \log 2 - \log\sigma_a - \tfrac{\log q}{p} - \log B(1/p,q)\Big)
      - \Big(\tfrac1p+q\Big)\sum_n \log\!\Big(1 + \tfrac{z_n^p}{q}\Big),
      \quad z_n = \frac{|r_n|}{\sigma_a(1+\lambda s_n)}.
    \]
    """
    _check_variance_parameters(sigma, lam, p, q)
    x = as_tensor(x).reshape(-1)
    n = x.numel()
    sigma_adj = _scale(sigma, lam, p, q)

    if math.isinf(p) and math.isinf(q):
        return _log_uniform(x, mu, sigma_adj).sum()

    z = _standardized_distance(x, mu, sigma_adj, lam, p, q)
    return n * _log_normalizer(sigma_adj, p, q) - _log_kernel(z, p, q).sum()


def skew_t_log_density(
    x: TensorLike, mu: float, sigma: float, lam: float, q: float
) -> torch.Tensor:
    """Skewed t log-density: the SGT with ``p=2``."""
    return skew_generalized_t_log_density(x, mu, sigma, lam, 2.0, q)


def generalized_t_log_density(
    x: TensorLike, mu: float, sigma: float, p: float, q: float
) -> torch.Tensor:
    """Symmetric generalized t log-density: the SGT with ``lambda=0``."""
    return skew_generalized_t_log_density(x, mu, sigma, 0.0, p, q)


# ------------------------ cdf ------------------------

def _log1m_exp(a: np.ndarray) -> np.ndarray:
    """log(1 - exp(a)) for a <= 0."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(a > -LOG2, np.log(-np.expm1(a)), np.log1p(-np.exp(a)))


def _log_left_tail(
    r: np.ndarray, sigma_adj: float, lam: np.ndarray, p: float, q: float
) -> np.ndarray:
    r"""
    \(\log F\) for residuals \(r\le 0\):
    \(\log(1-\lambda) - \log 2 + \log S(z)\), where \(S\) is the survival
    function of the standardized half distribution at
    \(z = |r|/(\sigma_a(1-\lambda))\).
    """
    z = -r / (sigma_adj * (1.0 - lam))
    with np.errstate(divide="ignore", over="ignore"):
        if math.isinf(p):
            log_s = np.log(np.clip(1.0 - z, 0.0, None))
        elif math.isinf(q):
            log_s = stats.gamma.logsf(z ** p, 1.0 / p)
        else:
            # W = u / (1 + u) ~ Beta(1/p, q), so P(W > w) = P(1 - W < 1 / (1 + u))
            log_s = stats.beta.logcdf(1.0 / (1.0 + z ** p / q), q, 1.0 / p)
    return np.log1p(-lam) - LOG2 + log_s


def _log_cdf(
    x: np.ndarray, mu: float, sigma_adj: float, lam: float, p: float, q: float
) -> np.ndarray:
    """Elementwise log-CDF; parameters are assumed valid."""
    if math.isinf(p) and math.isinf(q):
        with np.errstate(divide="ignore"):
            return np.log(np.clip((x - mu + sigma_adj) / (2.0 * sigma_adj), 0.0, 1.0))

    r = x + _shift(sigma_adj, lam, p, q) - mu
    # F(x; lam) = 1 - F(-x; -lam): only the left tail is ever evaluated
    reflect = r > 0
    lam_new = np.where(reflect, -lam, lam)
    r_new = np.where(reflect, -r, r)

    log_left = _log_left_tail(r_new, sigma_adj, lam_new, p, q)
    out = np.where(reflect, _log1m_exp(log_left), log_left)
    out = np.where(x == -np.inf, -np.inf, out)
    return np.where(x == np.inf, 0.0, out)


def skew_generalized_t_log_cdf(
    x: float, mu: float, sigma: float, lam: float, p: float, q: float
) -> float:
    r"""
    Log cumulative distribution function at a scalar ``x``.

    Returns ``-inf`` at \(x=-\infty\), ``0.0`` at \(x=+\infty\), and a value in
    \((-\infty, 0]\) otherwise.

    Raises
    ------
    DomainError
        Under the same conditions as :func:`skew_generalized_t_log_density`.
    """
    _check_variance_parameters(sigma, lam, p, q)
    sigma_adj = _scale(sigma, lam, p, q)
    x = float(x)
    if x == -math.inf:
        return -math.inf
    if x == math.inf:
        return 0.0
    return float(_log_cdf(np.array([x]), mu, sigma_adj, lam, p, q)[0])


# ------------------------ quantiles ------------------------

def _ppf(
    u: np.ndarray, mu: float, sigma_adj: float, lam: float, p: float, q: float
) -> np.ndarray:
    if math.isinf(p) and math.isinf(q):
        return mu - sigma_adj + 2.0 * sigma_adj * u

    left = u < (1.0 - lam) / 2.0
    lam_side = np.where(left, lam, -lam)
    tail = np.where(left, u, 1.0 - u)
    sf = 2.0 * tail / (1.0 - lam_side)

    if math.isinf(p):
        z = 1.0 - sf
    elif math.isinf(q):
        z = stats.gamma.isf(sf, 1.0 / p) ** (1.0 / p)
    else:
        t = stats.beta.ppf(sf, q, 1.0 / p)
        z = (q * (1.0 / t - 1.0)) ** (1.0 / p)

    r = np.where(left, -1.0, 1.0) * sigma_adj * (1.0 - lam_side) * z
    return r + mu - _shift(sigma_adj, lam, p, q)


# ------------------------ distribution object ------------------------

class SkewGeneralizedT:
    r"""
    Skew Generalized T distribution with mean ``mu`` and standard deviation ``sigma``.

    Parameters
    ----------
    mu : float
        Location (mean).
    sigma : float
        Standard deviation, \(\sigma>0\).
    lam : float
        Skewness \(\lambda\in(-1,1)\).
    p : float
        Peakedness shape, \(p>0\), may be ``math.inf``.
    q : float
        Tail shape, \(q>0\), may be ``math.inf``; requires \(pq>2\).
    device : str | torch.device | None
        Torch device for returned tensors.
    dtype : torch.dtype
        Floating dtype of returned tensors.

    Notes
    -----
    Special cases: \(p=2\) is the skewed t (Hansen's skewed t with
    \(\nu=2q\)), \(q=\infty\) the skewed generalized error distribution,
    \(\lambda=0\) the generalized t, \(p=2,\ q=\infty,\ \lambda=0\) the Normal.
    """

    def __init__(
        self,
        mu: float = 0.0,
        sigma: float = 1.0,
        lam: float = 0.0,
        p: float = 2.0,
        q: float = math.inf,
        device: str | torch.device | None = None,
        dtype: torch.dtype = torch.float64,
    ):
        self.sigma_adj: float = variance_adjusted_scale(sigma, lam, p, q)

        self.mu = float(mu)
        self.sigma = float(sigma)
        self.lam = float(lam)
        self.p = float(p)
        self.q = float(q)
        self.device = torch.device(device) if device else get_best_device()
        if self.device.type == "mps" and dtype == torch.float64:
            dtype = torch.float32  # no float64 on MPS
        self.dtype = dtype

        self.shift: float = _shift(self.sigma_adj, self.lam, self.p, self.q)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(mu={self.mu}, sigma={self.sigma}, lam={self.lam}, "
            f"p={self.p}, q={self.q})"
        )

    def _params(self) -> tuple[float, float, float, float, float]:
        return self.mu, self.sigma_adj, self.lam, self.p, self.q

    # ------------------------ moments ------------------------

    def mean(self) -> float:
        return self.mu

    def std(self) -> float:
        return self.sigma

    # ------------------------ pdf / cdf ------------------------

    def logpdf(self, x: TensorLike) -> torch.Tensor:
        """Elementwise log-density, same shape as ``x``."""
        x = as_tensor(x, self.device, self.dtype)
        return _log_density_terms(x, *self._params())

    def pdf(self, x: TensorLike) -> torch.Tensor:
        r"""\(f(x)=\exp(\log f(x))\)."""
        return torch.exp(self.logpdf(x))

    def log_prob(self, x: TensorLike) -> torch.Tensor:
        """Joint log-density of all entries of ``x`` (0-dim tensor)."""
        return skew_generalized_t_log_density(
            x, self.mu, self.sigma, self.lam, self.p, self.q
        )

    def logcdf(self, x: TensorLike) -> torch.Tensor:
        """Elementwise log-CDF, computed with SciPy on CPU."""
        x = as_tensor(x, self.device, self.dtype)
        x_np = x.detach().cpu().numpy().astype(np.float64)
        out = _log_cdf(x_np, *self._params())
        return torch.from_numpy(np.asarray(out, dtype=np.float64)).to(
            device=self.device, dtype=self.dtype
        )

    def cdf(self, x: TensorLike) -> torch.Tensor:
        return torch.exp(self.logcdf(x))

    # ------------------------ sampling ------------------------

    def ppf(self, u: TensorLike) -> torch.Tensor:
        """Quantile function (inverse CDF)."""
        u = as_tensor(u, self.device, self.dtype)
        u_np = u.detach().cpu().numpy().astype(np.float64)
        out = _ppf(u_np, *self._params())
        return torch.from_numpy(np.asarray(out, dtype=np.float64)).to(
            device=self.device, dtype=self.dtype
        )

    def rvs(self, size: int, generator: torch.Generator | None = None) -> torch.Tensor:
        r"""
        Random variates by exact inverse transform.

        With \(u\sim U(0,1)\) and tail mass \(t=u\) left of the mode
        (\(t=1-u\) right of it), the standardized distance solves
        \(S(z) = 2t/(1\mp\lambda)\) through SciPy's Beta (or Gamma) quantiles.

        Parameters
        ----------
        size : int
            Number of draws.
        generator : torch.Generator | None
            CPU generator for reproducible draws.
        """
        u = torch.rand(size, generator=generator, dtype=torch.float64)
        u_np = np.clip(u.numpy(), np.finfo(np.float64).tiny, None)
        out = _ppf(u_np, *self._params())
        return torch.from_numpy(np.asarray(out, dtype=np.float64)).to(
            device=self.device, dtype=self.dtype
        )
