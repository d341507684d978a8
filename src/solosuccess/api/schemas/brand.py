"""Brand guideline schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ColorPalette(BaseModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None
    accent: Optional[str] = None
    neutral: Optional[str] = None


class Typography(BaseModel):
    primary: Optional[str] = None
    secondary: Optional[str] = None


class BrandGuidelinesRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    company_name: str = Field(..., min_length=1, max_length=255)
    tagline: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    industry: Optional[str] = Field(default=None, max_length=100)
    target_audience: Optional[str] = Field(default=None, max_length=1000)
    brand_personality: list[str] = Field(default_factory=list, max_length=20)
    color_palette: ColorPalette = Field(default_factory=ColorPalette)
    typography: Typography = Field(default_factory=Typography)


class BrandGuidelines(BaseModel):
    company_name: str
    logo_usage: list[str]
    color_usage: list[str]
    typography_rules: list[str]
    spacing_rules: list[str]
