from typing import List, Optional

import torch


class WeightInitializer:
    """
    Seedable source of initial connection weights, uniform in [0, 1).

    Two initializers built with the same seed draw the same sequence, so a
    network built from a seed is reproducible.
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: Seed for the generator (nondeterministic if None)
        """
        self.seed = seed
        self.generator = torch.Generator()
        if seed is None:
            self.generator.seed()
        else:
            self.generator.manual_seed(seed)

    def draw(self, count: int) -> List[float]:
        """
        Draw initial weights.

        Args:
            count: Number of weights to draw

        Returns:
            List of floats in [0, 1)
        """
        if count == 0:
            return []
        return torch.rand(count, generator=self.generator, dtype=torch.float64).tolist()

    def __repr__(self):
        return f"WeightInitializer(seed={self.seed})"


class ConstantInitializer:
    """Draws the same weight every time."""

    def __init__(self, value: float = 0.5):
        self.value = float(value)

    def draw(self, count: int) -> List[float]:
        return [self.value] * count

    def __repr__(self):
        return f"ConstantInitializer(value={self.value})"
