"""RGB colors and linear gradients for edge styling."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Rgb:
    """A color in RGB space: channels in [0, 255], alpha in [0, 1]."""

    r: int
    g: int
    b: int
    a: float = 1.0

    def with_alpha(self, a: float) -> "Rgb":
        return replace(self, a=a)

    @property
    def hex(self) -> str:
        """The color as ``#rrggbb``, ignoring alpha."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def __str__(self) -> str:
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a})"

    @classmethod
    def parse(cls, value: str) -> "Rgb":
        """Parse ``#rgb`` or ``#rrggbb`` notation.

        Raises:
            ValueError: If value is not a hex color.
        """
        digits = value.lstrip("#")
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) != 6:
            raise ValueError(f"Invalid color: {value!r}")
        try:
            return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
        except ValueError as err:
            raise ValueError(f"Invalid color: {value!r}") from err


WHITE = Rgb(255, 255, 255)
RED = Rgb(255, 0, 0)
GREEN = Rgb(0, 255, 0)
BLUE = Rgb(0, 0, 255)
BLACK = Rgb(0, 0, 0)


@dataclass(frozen=True)
class Gradient:
    """A linear gradient from start to end, interpolated in RGB space."""

    start: Rgb
    end: Rgb

    def color(self, t: float) -> Rgb:
        """Return the color at t in [0, 1]; channels are rounded."""
        s, e = self.start, self.end
        return Rgb(
            round(s.r * (1 - t) + e.r * t),
            round(s.g * (1 - t) + e.g * t),
            round(s.b * (1 - t) + e.b * t),
            s.a * (1 - t) + e.a * t,
        )
