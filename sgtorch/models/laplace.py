from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import torch

from ..utils.torch_utils import TensorLike
from .base import ReferenceSamplingConfig, _as_draws, _resolve_draws


@dataclass
class LaplacePosterior:
    """
    ``test-laplace_<r>``: radially symmetric exponential-power target.

    Model (unnormalized):
        log p(x) = -||x||_2^r,   x in R^N

    Exact sampling: ||x||^r ~ Gamma(N/r, 1) with a uniform direction.
    """
    N: int = 2
    r: float = 1.0
    config: ReferenceSamplingConfig = field(default_factory=ReferenceSamplingConfig)
    device: torch.device | str | None = None
    dtype: torch.dtype = torch.float64

    def __post_init__(self) -> None:
        if self.N < 1:
            raise ValueError("N must be a positive integer.")
        if not self.r > 0:
            raise ValueError("r must be positive.")
        self.r = float(self.r)
        self.device = torch.device(self.device) if self.device is not None else torch.device("cpu")

    @property
    def name(self) -> str:
        return f"test-laplace_{self.r:g}"

    @property
    def dim(self) -> int:
        return self.N

    def data(self) -> dict:
        return {"N": self.N, "r": self.r}

    def dimensions(self) -> dict[str, int]:
        return {"x": self.N}

    def log_prob(self, draws: TensorLike) -> torch.Tensor:
        x = _as_draws(draws, self.dim, device=self.device, dtype=self.dtype)
        return -torch.linalg.vector_norm(x, dim=-1) ** self.r

    def sample(self, num_draws: int | None = None, seed: int | None = None) -> torch.Tensor:
        n, seed = _resolve_draws(self.config, num_draws, seed)
        rng = np.random.default_rng(seed)

        direction = rng.standard_normal((n, self.N))
        direction /= np.linalg.norm(direction, axis=1, keepdims=True)
        radius = rng.gamma(self.N / self.r, size=n) ** (1.0 / self.r)

        out = direction * radius[:, None]
        return torch.from_numpy(out).to(device=self.device, dtype=self.dtype)


@dataclass
class HeavyLightTailPosterior:
    """
    ``test-heavy_light_tail``: one heavy (Laplace) and one light tailed coordinate.

    Model (unnormalized):
        log p(x) = -|x_1| - x_2^r

    Exact sampling needs an even integer ``r``: x_1 ~ Laplace(0, 1) and
    |x_2|^r ~ Gamma(1/r, 1) with a random sign.
    """
    r: float = 4.0
    config: ReferenceSamplingConfig = field(default_factory=ReferenceSamplingConfig)
    device: torch.device | str | None = None
    dtype: torch.dtype = torch.float64

    name: str = field(default="test-heavy_light_tail", init=False)
    dim: int = field(default=2, init=False)

    def __post_init__(self) -> None:
        if not self.r > 0:
            raise ValueError("r must be positive.")
        self.r = float(self.r)
        self.device = torch.device(self.device) if self.device is not None else torch.device("cpu")

    def data(self) -> dict:
        return {"r": self.r}

    def dimensions(self) -> dict[str, int]:
        return {"x": 2}

    def log_prob(self, draws: TensorLike) -> torch.Tensor:
        x = _as_draws(draws, self.dim, device=self.device, dtype=self.dtype)
        return -x[..., 0].abs() - x[..., 1] ** self.r

    def sample(self, num_draws: int | None = None, seed: int | None = None) -> torch.Tensor:
        if not (self.r.is_integer() and int(self.r) % 2 == 0):
            raise ValueError(f"Exact sampling requires an even integer r, got r={self.r}.")
        n, seed = _resolve_draws(self.config, num_draws, seed)
        rng = np.random.default_rng(seed)

        heavy = rng.laplace(0.0, 1.0, size=n)
        sign = rng.choice([-1.0, 1.0], size=n)
        light = sign * rng.gamma(1.0 / self.r, size=n) ** (1.0 / self.r)

        out = np.stack([heavy, light], axis=1)
        return torch.from_numpy(out).to(device=self.device, dtype=self.dtype)
