"""Base protocol and shared configuration for reference test posteriors."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import torch

from ..utils.torch_utils import TensorLike, as_tensor


@dataclass(frozen=True)
class ReferenceSamplingConfig:
    """Settings used to compute reference posterior draws.

    Defaults are the ones every test posterior is registered with:
    10 chains of 20000 iterations, half of them warmup, thinned by 10.
    """
    chains: int = 10
    iter: int = 20_000
    warmup: int = 10_000
    thin: int = 10
    seed: int = 4711
    adapt_delta: float = 0.92

    def __post_init__(self) -> None:
        if self.chains <= 0:
            raise ValueError("`chains` must be a positive integer.")
        if not (0 <= self.warmup < self.iter):
            raise ValueError("`warmup` must satisfy 0 <= warmup < iter.")
        if self.thin <= 0:
            raise ValueError("`thin` must be a positive integer.")
        if not (0.0 < self.adapt_delta < 1.0):
            raise ValueError("`adapt_delta` must be in (0, 1).")

    @property
    def draws_per_chain(self) -> int:
        return (self.iter - self.warmup) // self.thin

    @property
    def total_draws(self) -> int:
        return self.chains * self.draws_per_chain


@runtime_checkable
class ReferencePosterior(Protocol):
    """Protocol defining the interface for reference test posteriors.

    All posteriors must implement:
    - data(): the data block the model is conditioned on
    - dimensions(): named parameter sizes of the reference draws
    - log_prob(draws): unnormalized log-density of a batch of draws
    - sample(num_draws, seed): exact i.i.d. reference draws

    Attributes:
        name: Model name, also used for the data entry
        dim: Length of one unconstrained draw
        config: Reference sampling configuration
        device: PyTorch device for computations
        dtype: Data type for returned tensors
    """
    name: str
    dim: int
    config: ReferenceSamplingConfig
    device: torch.device
    dtype: torch.dtype

    def data(self) -> dict:
        """Data block as a plain dict."""
        ...

    def dimensions(self) -> dict[str, int]:
        """Named parameter dimensions."""
        ...

    def log_prob(self, draws: TensorLike) -> torch.Tensor:
        """Log-density of draws.

        Parameters
        ----------
        draws : tensor-like
            Shape (..., dim)

        Returns
        -------
        torch.Tensor
            Shape (...)
        """
        ...

    def sample(self, num_draws: int | None = None, seed: int | None = None) -> torch.Tensor:
        """Exact reference draws.

        Parameters
        ----------
        num_draws : int | None
            Number of draws; defaults to ``config.total_draws``
        seed : int | None
            Random seed; defaults to ``config.seed``

        Returns
        -------
        torch.Tensor
            Shape (num_draws, dim)
        """
        ...


def posterior_name(model: ReferencePosterior) -> str:
    """Posterior name pairing the model with its own data set."""
    return f"{model.name}-{model.name}"


def _as_draws(
    draws: TensorLike, dim: int, *, device: torch.device, dtype: torch.dtype
) -> torch.Tensor:
    x = as_tensor(draws, device, dtype)
    if x.ndim == 0 or x.shape[-1] != dim:
        raise ValueError(f"Draws must have shape (..., {dim}), got {tuple(x.shape)}.")
    return x


def _resolve_draws(
    config: ReferenceSamplingConfig, num_draws: int | None, seed: int | None
) -> tuple[int, int]:
    n = config.total_draws if num_draws is None else int(num_draws)
    if n < 0:
        raise ValueError("`num_draws` must be non-negative.")
    return n, config.seed if seed is None else int(seed)
