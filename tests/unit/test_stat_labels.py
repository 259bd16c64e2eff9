"""Tests for STAT axis value label reconciliation."""

import pytest

from bon_fonts.core.naming import get_name
from bon_fonts.core.stat_labels import LabelContext, reconcile_label, reconcile_stat_labels
from tests.conftest import build_font, rect_glyph

MAPPING = {"Bold": "SemiBold"}


@pytest.mark.parametrize(
    "label, style, mapping, expected, rule",
    [
        ("Regular", "Medium", {"Medium": "Regular"}, "Medium", "configured-source-weight"),
        ("Regular Italic", "Medium Italic", {"Medium": "Regular"}, "Medium", "configured-source-weight"),
        ("SemiBold", "Bold", MAPPING, "", "configured-source-weight"),
        ("Semibold", "Bold Italic", {}, "", "bold-duplicates-style"),
        ("Italic", "Bold Italic", MAPPING, "", "italic-duplicates-style"),
        ("Italic", "Italic", {}, "Italic", None),
        ("Thin", "Light", {}, "Light", "intermediate-weight-synonym"),
        ("Medium", "Regular", {}, "Medium", None),
        ("Medium", "Medium Italic", {}, "Medium", None),
        ("Condensed", "Bold", MAPPING, "Condensed", None),
    ],
)
def test_reconcile_label(label, style, mapping, expected, rule):
    """Test each rule and the untouched default."""
    assert reconcile_label(label, LabelContext(style, mapping)) == (expected, rule)


def test_reconcile_label_is_fixed_point():
    """Test a reconciled label does not change when reconciled again."""
    ctx = LabelContext("Bold", MAPPING)
    label, _ = reconcile_label("SemiBold", ctx)

    assert reconcile_label(label, ctx) == (label, None)


def test_reconcile_stat_labels_only_touches_font_specific_ids():
    """Test standard name IDs are never treated as labels."""
    font = build_font(
        {".notdef": rect_glyph(0, 0, 500, 700)},
        {},
        family="Foo",
        style="Bold",
        extra_names={256: "Bold", 257: "Wide"},
    )

    changed = reconcile_stat_labels(font, LabelContext("Bold"))

    assert changed == {"bold-duplicates-style": 1}
    assert get_name(font, 2) == "Bold"
    assert get_name(font, 256) == ""
    assert get_name(font, 257) == "Wide"
