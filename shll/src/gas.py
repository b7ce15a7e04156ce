"""
Gas properties for calorically perfect gas.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GasProperties:
    """Thermodynamic constants for a calorically perfect (ideal) gas."""
    gamma: float = 1.4          # Ratio of specific heats (diatomic)
    R: float = 1.0              # Specific gas constant (non-dimensional)

    def __post_init__(self):
        if self.gamma <= 1.0:
            raise ValueError(f"gamma must be greater than 1, got {self.gamma}")
        if self.R <= 0.0:
            raise ValueError(f"R must be positive, got {self.R}")

    @property
    def cp(self) -> float:
        """Specific heat at constant pressure."""
        return self.gamma * self.R / (self.gamma - 1)

    @property
    def cv(self) -> float:
        """Specific heat at constant volume."""
        return self.R / (self.gamma - 1)
