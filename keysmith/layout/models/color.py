"""RGB color model."""

import colorsys
import re
from typing import Any

from pydantic import ConfigDict, Field, model_validator

from keysmith.models.base import KeysmithBaseModel


HEX_COLOR_PATTERN = re.compile(r"^#?([0-9A-Fa-f]{6})$")


class RgbColor(KeysmithBaseModel):
    """24-bit color with 0-255 channels.

    Accepts either channel values or a ``#RRGGBB`` string on construction.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)

    @model_validator(mode="before")
    @classmethod
    def parse_hex_string(cls, data: Any) -> Any:
        """Allow ``RgbColor.model_validate("#FF0000")``."""
        if isinstance(data, str):
            match = HEX_COLOR_PATTERN.match(data.strip())
            if not match:
                raise ValueError(f"Invalid hex color: {data!r}")
            value = match.group(1)
            return {
                "r": int(value[0:2], 16),
                "g": int(value[2:4], 16),
                "b": int(value[4:6], 16),
            }
        return data

    @classmethod
    def from_hex(cls, value: str) -> "RgbColor":
        """Parse ``#RRGGBB`` (leading ``#`` optional).

        Raises:
            ValueError: If the string is not a six digit hex color
        """
        return cls.model_validate(value)

    def to_hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"

    def dim(self, percent: int) -> "RgbColor":
        """Scale every channel to ``percent`` of its value; 0 is black."""
        return RgbColor(
            r=self.r * percent // 100,
            g=self.g * percent // 100,
            b=self.b * percent // 100,
        )

    def saturate(self, percent: int) -> "RgbColor":
        """Scale HSV saturation to ``percent``, capped at full saturation."""
        h, s, v = colorsys.rgb_to_hsv(self.r / 255, self.g / 255, self.b / 255)
        r, g, b = colorsys.hsv_to_rgb(h, min(1.0, s * percent / 100), v)
        return RgbColor(r=round(r * 255), g=round(g * 255), b=round(b * 255))

    def __str__(self) -> str:
        return self.to_hex()


# Terminal value of the color inheritance chain
FALLBACK_COLOR = RgbColor(r=0x80, g=0x80, b=0x80)
BLACK = RgbColor(r=0, g=0, b=0)


__all__ = ["BLACK", "FALLBACK_COLOR", "HEX_COLOR_PATTERN", "RgbColor"]
