"""Colour mapping of StateFields for visual inspection.

Positive amplitude shows blue, negative amplitude red, and the velocity term
adds a green tint normalized by a caller-supplied maximum. The renderer keeps
no state beyond that constant.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import torch
from matplotlib import image as mpimg
from matplotlib.axes import Axes

__all__ = ["FieldRenderer"]


class FieldRenderer:
    def __init__(self, max_velocity_term: float) -> None:
        if not float(max_velocity_term) > 0.0:
            raise ValueError(f"max_velocity_term must be > 0, got {max_velocity_term!r}")
        self.max_velocity_term = float(max_velocity_term)

    def colorize(self, field: torch.Tensor) -> torch.Tensor:
        """RGBA in [0, 1], shape (ny, nx, 4); rows are y."""
        amp = field[..., 0].detach().to(torch.float32)
        vel = field[..., 1].detach().to(torch.float32)
        pos = torch.clamp(amp, min=0.0)
        neg = torch.clamp(-amp, min=0.0)
        tint = torch.clamp(vel / self.max_velocity_term, max=1.0)
        # rgba = pos*(0,0,1,1) + neg*(1,0,0,1) + tint*(0,1,0,1), then clamped
        rgba = torch.stack([neg, tint, pos, pos + neg + tint], dim=-1)
        rgba = torch.clamp(rgba, 0.0, 1.0)
        return rgba.transpose(0, 1).contiguous()

    def to_numpy(self, field: torch.Tensor) -> np.ndarray:
        return self.colorize(field).cpu().numpy()

    def save(self, field: torch.Tensor, path: str | Path) -> Path:
        """Write a PNG with y pointing up."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        mpimg.imsave(out, self.to_numpy(field), origin="lower")
        return out

    def plot(self, field: torch.Tensor, ax: Axes, *, title: Optional[str] = None) -> None:
        ax.imshow(self.to_numpy(field), origin="lower", interpolation="nearest")
        ax.set_xticks([])
        ax.set_yticks([])
        if title:
            ax.set_title(title)
