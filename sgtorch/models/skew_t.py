from __future__ import annotations

from dataclasses import dataclass, field

import torch

from ..distributions.skew_generalized_t import SkewGeneralizedT
from ..utils.torch_utils import TensorLike
from .base import ReferenceSamplingConfig, _as_draws, _resolve_draws


@dataclass
class SkewTPosterior:
    """
    ``test-skew_t``: N i.i.d. Skew Generalized T parameters.

    Model:
        x_n ~ SGT(mu, sigma, lam, p, q),  n = 1..N

    The defaults are the registered data set (N=2, mu=0, sigma=1,
    lam=0.9, p=3, q=10).
    """
    N: int = 2
    mu: float = 0.0
    sigma: float = 1.0
    lam: float = 0.9
    p: float = 3.0
    q: float = 10.0
    config: ReferenceSamplingConfig = field(default_factory=ReferenceSamplingConfig)
    device: torch.device | str | None = None
    dtype: torch.dtype = torch.float64

    name: str = field(default="test-skew_t", init=False)
    dist: SkewGeneralizedT = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.N < 1:
            raise ValueError("N must be a positive integer.")
        self.device = torch.device(self.device) if self.device is not None else torch.device("cpu")
        self.dist = SkewGeneralizedT(
            mu=self.mu, sigma=self.sigma, lam=self.lam, p=self.p, q=self.q,
            device=self.device, dtype=self.dtype,
        )

    @property
    def dim(self) -> int:
        return self.N

    def data(self) -> dict:
        return {
            "N": self.N, "mu": self.mu, "sigma": self.sigma,
            "lambda": self.lam, "p": self.p, "q": self.q,
        }

    def dimensions(self) -> dict[str, int]:
        return {"x": self.N}

    def log_prob(self, draws: TensorLike) -> torch.Tensor:
        x = _as_draws(draws, self.dim, device=self.device, dtype=self.dtype)
        return self.dist.logpdf(x).sum(dim=-1)

    def sample(self, num_draws: int | None = None, seed: int | None = None) -> torch.Tensor:
        n, seed = _resolve_draws(self.config, num_draws, seed)
        gen = torch.Generator().manual_seed(seed)
        return self.dist.rvs(n * self.N, generator=gen).reshape(n, self.N)
