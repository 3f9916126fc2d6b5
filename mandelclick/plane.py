from __future__ import annotations

import math
from dataclasses import dataclass

@dataclass(frozen=True)
class PlaneVector:
    """A point of the plane, also usable as a complex number x + iy."""

    x: float
    y: float

    def add(self, other: PlaneVector) -> PlaneVector:
        return PlaneVector(self.x + other.x, self.y + other.y)

    def sub(self, other: PlaneVector) -> PlaneVector:
        return PlaneVector(self.x - other.x, self.y - other.y)

    def scale(self, k: float) -> PlaneVector:
        return PlaneVector(self.x * k, self.y * k)

    def divide(self, k: float) -> PlaneVector:
        return PlaneVector(self.x / k, self.y / k)

    def hadamard(self, other: PlaneVector) -> PlaneVector:
        return PlaneVector(self.x * other.x, self.y * other.y)

    def complex_product(self, other: PlaneVector) -> PlaneVector:
        return PlaneVector(
            self.x * other.x - self.y * other.y,
            self.x * other.y + self.y * other.x,
        )

    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def as_list(self) -> list:
        return [self.x, self.y]

    @classmethod
    def from_pair(cls, pair) -> PlaneVector:
        if not (isinstance(pair, (list, tuple)) and len(pair) == 2):
            raise ValueError(f"Expected an [x, y] pair, got {pair!r}")
        return cls(float(pair[0]), float(pair[1]))
