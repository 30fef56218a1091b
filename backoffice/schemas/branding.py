from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BrandingSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    logo_url: Optional[str] = None
    primary_color: str
    secondary_color: str
    font_family: str


class BrandingUpdate(BaseModel):
    name: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    font_family: Optional[str] = None


class FontOption(BaseModel):
    value: str
    label: str


class BrandingView(BaseModel):
    settings: BrandingSettings
    theme: dict[str, str] = Field(default_factory=dict)
    font_options: list[FontOption] = Field(default_factory=list)
