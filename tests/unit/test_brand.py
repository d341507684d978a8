"""Unit tests for brand guideline generation."""

from solosuccess.api.schemas.brand import BrandGuidelinesRequest
from solosuccess.services.brand import (
    INDUSTRY_COLOR_RULES,
    color_usage_rules,
    generate_guidelines,
    logo_usage_rules,
    spacing_rules,
    typography_rules,
)


def make_brand(**overrides) -> BrandGuidelinesRequest:
    return BrandGuidelinesRequest(company_name="Northwind", **overrides)


class TestColorUsage:

    def test_palette_colors_named(self):
        rules = color_usage_rules(
            make_brand(color_palette={"primary": "#112233", "accent": "#ff6600", "neutral": "#f5f5f5"})
        )

        assert "Use #112233 as the primary brand color for main elements" in rules
        assert "Use #ff6600 sparingly for call-to-action buttons and highlights" in rules
        assert "Use #f5f5f5 for backgrounds and supporting elements" in rules
        assert "Use neutral colors for backgrounds and supporting elements" not in rules

    def test_generic_neutral_rule_without_neutral(self):
        rules = color_usage_rules(make_brand())

        assert "Use neutral colors for backgrounds and supporting elements" in rules
        assert "Ensure sufficient contrast ratios for accessibility (WCAG AA compliance)" in rules

    def test_industry_rule(self):
        rules = color_usage_rules(make_brand(industry="Technology"))

        assert rules[-1] == INDUSTRY_COLOR_RULES["Technology"]

    def test_unknown_industry_adds_nothing(self):
        assert color_usage_rules(make_brand(industry="Bakery")) == color_usage_rules(make_brand())


class TestPersonalityRules:

    def test_professional_logo_rules(self):
        rules = logo_usage_rules(make_brand(brand_personality=["Professional"]))

        assert "Use the logo in a formal, corporate context with professional spacing" in rules
        assert rules[-1] == "Use high-resolution versions for print materials (minimum 300 DPI)"

    def test_modern_and_traditional_typography(self):
        rules = typography_rules(
            make_brand(brand_personality=["Modern", "Traditional"], typography={"primary": "Inter"})
        )

        assert rules[0] == "Use Inter as the primary font for headings and important text"
        assert "Use clean, sans-serif fonts for a modern appearance" in rules
        assert "Use classic, serif fonts for traditional appeal" in rules

    def test_minimalist_spacing(self):
        base = spacing_rules(make_brand())
        minimalist = spacing_rules(make_brand(brand_personality=["Minimalist"]))

        assert len(minimalist) == len(base) + 2
        assert "Use abundant white space for minimalist aesthetic" in minimalist


class TestGenerateGuidelines:

    def test_sections(self):
        guidelines = generate_guidelines(make_brand(brand_personality=["Creative", "Energetic"]))

        assert guidelines.company_name == "Northwind"
        assert len(guidelines.logo_usage) == 7
        assert len(guidelines.spacing_rules) == 8
        assert guidelines.typography_rules[0] == "Maintain consistent font sizes across all brand materials"

    def test_deterministic(self):
        brand = make_brand(industry="Finance", brand_personality=["Professional"])

        assert generate_guidelines(brand) == generate_guidelines(brand)
