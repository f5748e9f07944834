from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Rgb:
    """Linear RGB triple with components nominally in ``[0, 1]``.

    The query engine only relies on ``+`` and scalar ``*``; any value type with
    those operators can be stored in an LED instead.
    """

    r: float
    g: float
    b: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "r", float(self.r))
        object.__setattr__(self, "g", float(self.g))
        object.__setattr__(self, "b", float(self.b))

    def __add__(self, other: "Rgb") -> "Rgb":
        if not isinstance(other, Rgb):
            return NotImplemented
        return Rgb(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other: "Rgb") -> "Rgb":
        if not isinstance(other, Rgb):
            return NotImplemented
        return Rgb(self.r - other.r, self.g - other.g, self.b - other.b)

    def __mul__(self, other: Union[float, "Rgb"]) -> "Rgb":
        if isinstance(other, Rgb):
            return Rgb(self.r * other.r, self.g * other.g, self.b * other.b)
        if isinstance(other, (int, float)):
            factor = float(other)
            return Rgb(self.r * factor, self.g * factor, self.b * factor)
        return NotImplemented

    __rmul__ = __mul__

    def clamped(self) -> "Rgb":
        return Rgb(*(min(max(c, 0.0), 1.0) for c in self.as_tuple()))

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def to_u8(self) -> Tuple[int, int, int]:
        """Return the clamped color scaled to 8-bit channels."""

        c = self.clamped()
        return (round(c.r * 255), round(c.g * 255), round(c.b * 255))

    def __repr__(self) -> str:
        return f"Rgb({self.r:.3g}, {self.g:.3g}, {self.b:.3g})"


BLACK = Rgb(0.0, 0.0, 0.0)
WHITE = Rgb(1.0, 1.0, 1.0)

__all__ = ["Rgb", "BLACK", "WHITE"]
