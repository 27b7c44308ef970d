"""Color token models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ColorCategory = Literal["primary", "secondary", "accent", "neutral"]


class ColorToken(BaseModel):
    value: str = Field(..., description="Canonical #rrggbb value")
    name: str
    variable: str = Field(..., description="CSS custom property, e.g. --color-red")
    usage: int = Field(..., ge=1)
    category: ColorCategory

    @property
    def reference(self) -> str:
        return f"var({self.variable})"


class ColorPalette(BaseModel):
    tokens: list[ColorToken] = Field(default_factory=list)
    css: str = ""
    scss: str = ""
    json_text: str = "{}"

    def mapping(self) -> dict[str, str]:
        """Canonical value → symbolic reference."""
        return {t.value: t.reference for t in self.tokens}
