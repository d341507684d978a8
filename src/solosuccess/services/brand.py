"""
Brand guideline generation.

The rules are deterministic: a fixed base set extended by the brand's
personality traits, industry, colors and fonts.
"""

from solosuccess.api.schemas.brand import BrandGuidelines, BrandGuidelinesRequest

INDUSTRY_COLOR_RULES = {
    "Healthcare": "Prioritize calming, trustworthy colors in healthcare communications",
    "Technology": "Use modern, tech-forward colors that convey innovation",
    "Finance": "Emphasize professional, trustworthy colors in financial communications",
}


def logo_usage_rules(brand: BrandGuidelinesRequest) -> list[str]:
    traits = set(brand.brand_personality)
    rules = [
        'Always maintain a minimum clear space around the logo equal to the height of the "x" in the logo',
        "Never alter, distort, or recreate the logo in any way",
        "Use the logo on backgrounds with sufficient contrast for readability",
    ]

    if "Professional" in traits:
        rules.append("Use the logo in a formal, corporate context with professional spacing")
        rules.append("Maintain consistent logo placement in all business communications")
    if "Creative" in traits:
        rules.append("Allow creative applications while maintaining logo integrity")
        rules.append("Use the logo in artistic contexts that align with brand values")

    rules.append("Ensure the logo is never smaller than 24px in digital applications")
    rules.append("Use high-resolution versions for print materials (minimum 300 DPI)")
    return rules


def color_usage_rules(brand: BrandGuidelinesRequest) -> list[str]:
    palette = brand.color_palette
    rules = []

    if palette.primary:
        rules.append(f"Use {palette.primary} as the primary brand color for main elements")
    if palette.secondary:
        rules.append(f"Use {palette.secondary} for secondary elements and accents")
    if palette.accent:
        rules.append(f"Use {palette.accent} sparingly for call-to-action buttons and highlights")
    if palette.neutral:
        rules.append(f"Use {palette.neutral} for backgrounds and supporting elements")

    rules.append("Never use colors that conflict with the established palette")
    rules.append("Ensure sufficient contrast ratios for accessibility (WCAG AA compliance)")
    if not palette.neutral:
        rules.append("Use neutral colors for backgrounds and supporting elements")

    if brand.industry in INDUSTRY_COLOR_RULES:
        rules.append(INDUSTRY_COLOR_RULES[brand.industry])
    return rules


def typography_rules(brand: BrandGuidelinesRequest) -> list[str]:
    traits = set(brand.brand_personality)
    fonts = brand.typography
    rules = []

    if fonts.primary:
        rules.append(f"Use {fonts.primary} as the primary font for headings and important text")
    if fonts.secondary:
        rules.append(f"Use {fonts.secondary} for body text and secondary information")

    rules.append("Maintain consistent font sizes across all brand materials")
    rules.append("Use proper line spacing (1.4-1.6x) for optimal readability")
    rules.append("Never use more than 3 different font families in a single design")

    if "Modern" in traits:
        rules.append("Use clean, sans-serif fonts for a modern appearance")
        rules.append("Avoid overly decorative or script fonts")
    if "Traditional" in traits:
        rules.append("Use classic, serif fonts for traditional appeal")
        rules.append("Maintain formal typography hierarchy")

    rules.append("Ensure text is legible across all brand touchpoints")
    rules.append("Use appropriate font weights (regular, medium, bold) consistently")
    return rules


def spacing_rules(brand: BrandGuidelinesRequest) -> list[str]:
    traits = set(brand.brand_personality)
    rules = [
        "Use consistent spacing units (8px grid system) for all layouts",
        "Maintain generous white space for clean, uncluttered designs",
        "Ensure adequate spacing between text elements for readability",
    ]

    if "Minimalist" in traits:
        rules.append("Use abundant white space for minimalist aesthetic")
        rules.append("Maintain large margins and padding in all layouts")
    if "Energetic" in traits:
        rules.append("Use dynamic spacing that creates visual movement")
        rules.append("Allow for creative spacing variations while maintaining structure")

    rules.append("Ensure consistent spacing in responsive designs")
    rules.append("Use proportional spacing that scales with content")
    rules.append("Maintain visual hierarchy through strategic spacing")
    return rules


def generate_guidelines(brand: BrandGuidelinesRequest) -> BrandGuidelines:
    return BrandGuidelines(
        company_name=brand.company_name,
        logo_usage=logo_usage_rules(brand),
        color_usage=color_usage_rules(brand),
        typography_rules=typography_rules(brand),
        spacing_rules=spacing_rules(brand),
    )
