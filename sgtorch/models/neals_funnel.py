from __future__ import annotations

from dataclasses import dataclass, field

import torch
from torch.distributions import Normal

from ..utils.torch_utils import TensorLike
from .base import ReferenceSamplingConfig, _as_draws, _resolve_draws


@dataclass
class NealsFunnelPosterior:
    """
    ``test-neals_funnel``: Neal's funnel in its non-centered form.

    Model:
        y_raw ~ N(0, 1),  x_raw ~ N(0, 1)
        y = 3 * y_raw,    x = exp(y / 2) * x_raw

    Draws for ``log_prob`` and ``sample`` are unconstrained (y_raw, x_raw);
    ``constrain`` maps them to the reported (x, y).
    """
    config: ReferenceSamplingConfig = field(default_factory=ReferenceSamplingConfig)
    device: torch.device | str | None = None
    dtype: torch.dtype = torch.float64

    name: str = field(default="test-neals_funnel", init=False)
    dim: int = field(default=2, init=False)
    std_normal: Normal = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.device = torch.device(self.device) if self.device is not None else torch.device("cpu")
        self.std_normal = Normal(
            torch.zeros((), device=self.device, dtype=self.dtype),
            torch.ones((), device=self.device, dtype=self.dtype),
        )

    def data(self) -> dict:
        return {}

    def dimensions(self) -> dict[str, int]:
        return {"x": 1, "y": 1}

    def log_prob(self, draws: TensorLike) -> torch.Tensor:
        z = _as_draws(draws, self.dim, device=self.device, dtype=self.dtype)
        return self.std_normal.log_prob(z).sum(dim=-1)

    def constrain(self, draws: TensorLike) -> torch.Tensor:
        """Map (y_raw, x_raw) draws to (x, y), shape (..., 2)."""
        z = _as_draws(draws, self.dim, device=self.device, dtype=self.dtype)
        y = 3.0 * z[..., 0]
        x = torch.exp(y / 2.0) * z[..., 1]
        return torch.stack([x, y], dim=-1)

    def sample(self, num_draws: int | None = None, seed: int | None = None) -> torch.Tensor:
        n, seed = _resolve_draws(self.config, num_draws, seed)
        gen = torch.Generator().manual_seed(seed)
        z = torch.randn((n, self.dim), generator=gen, dtype=torch.float64)
        return z.to(device=self.device, dtype=self.dtype)
