"""Tests for weight and build target configuration."""

from bon_fonts.config.instances import (
    BuildTarget,
    Weight,
    file_style_name,
    style_name,
    weight_value,
)


def test_weight_enum_values():
    """Test Weight enum has correct values."""
    assert Weight.THIN == 100
    assert Weight.REGULAR == 400
    assert Weight.BOLD == 700
    assert Weight.BLACK == 900


def test_weight_value():
    """Test weight name lookup with the Regular default."""
    assert weight_value("ExtraLight") == 200
    assert weight_value("SemiBold") == 600
    assert weight_value("ExtraBold") == 800
    assert weight_value("Unknown") == 400


def test_style_name():
    """Test style names for upright and italic weights."""
    assert style_name("Regular", False) == "Regular"
    assert style_name("Regular", True) == "Italic"
    assert style_name("Bold", True) == "Bold Italic"
    assert file_style_name("SemiBold", True) == "SemiBoldItalic"


def test_build_target_names():
    """Test output and intermediate filename generation."""
    target = BuildTarget("JetBrainsMono", "SemiBold", italic=True)

    assert target.style_name == "SemiBold Italic"
    assert target.weight_class == 600
    assert target.output_name("Bon") == "Bon-JetBrainsMono-SemiBoldItalic.ttf"
    assert target.intermediate_name == "JetBrainsMono-SemiBold-Italic.ttf"


def test_build_target_regular_italic():
    """Test Regular italic files are named plain Italic."""
    target = BuildTarget("GoogleSansCode", "Regular", italic=True)

    assert target.output_name("Bon") == "Bon-GoogleSansCode-Italic.ttf"
    assert str(target) == "GoogleSansCode Italic"
