from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from wavefield.grid import GridParameters
from wavefield.kernels.runtime import get_device


@dataclass
class SimulationConfig:
    """Configuration for a wave simulation run."""

    # Grid and time
    resolution: tuple[int, int] = (256, 256)
    length: tuple[float, float] = (1.0, 1.0)   # meters
    dt: float = 1e-3                           # seconds
    steps: int = 500

    # Kernel
    device: str = field(default_factory=get_device)
    backend: str = "auto"                      # auto | torch | triton
    address_mode: str = "clamp"                # clamp | wrap

    # Initial condition: Gaussian pulse at rest in a uniform medium
    pulse_center: Optional[tuple[float, float]] = None   # domain center if None
    pulse_width: float = 0.03
    pulse_amplitude: float = 1.0
    velocity_term: float = 1.0                 # c^2

    # Rendering
    max_velocity_term: float = 1.0             # green-tint normalization
    frame_interval: int = 50                   # 0 = final frame only
    output_dir: Path = field(default_factory=lambda: Path("artifacts/frames"))

    def grid(self) -> GridParameters:
        return GridParameters.create(self.resolution, self.length, self.dt)
