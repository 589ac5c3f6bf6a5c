"""PyTorch utility functions."""

from typing import Sequence, Union

import numpy as np
import torch

TensorLike = Union[torch.Tensor, np.ndarray, Sequence[float], float]


def get_best_device() -> torch.device:
    """
    Get the best available PyTorch device.

    Returns
    -------
    torch.device
        CUDA device if available, then MPS, otherwise CPU
    """
    if torch.cuda.is_available():
        return torch.device("cuda")
    elif hasattr(torch.backends, "mps") and torch.backends.mps.is_available():
        return torch.device("mps")
    else:
        return torch.device("cpu")


def as_tensor(
    x: TensorLike,
    device: torch.device | str | None = None,
    dtype: torch.dtype = torch.float64,
) -> torch.Tensor:
    """
    Convert tensors, arrays, sequences and scalars to a tensor.

    Tensors keep their device unless one is given explicitly, so autograd
    graphs built on the caller's tensor are preserved.
    """
    if isinstance(x, torch.Tensor):
        if device is None:
            return x.to(dtype=dtype)
        return x.to(device=device, dtype=dtype)
    if isinstance(x, np.ndarray):
        return torch.from_numpy(x).to(device=device, dtype=dtype)
    return torch.as_tensor(x, device=device, dtype=dtype)
