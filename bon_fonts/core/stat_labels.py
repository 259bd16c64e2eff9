"""
STAT axis value label reconciliation.

Axis value labels live in font-specific name records (ID >= 256). Some
platforms show them next to the style name, so a label that repeats the
style, or names the borrowed source weight, has to be rewritten.

The rules are an ordered table of pure functions. Each takes the current
label and the request context and returns the new label, or None when it
does not apply. The first rule that returns a value wins; labels no rule
matches are left untouched.
"""

from collections.abc import Callable
from dataclasses import dataclass, field

from fontTools.ttLib import TTFont

from bon_fonts.core.naming import (
    BOLD,
    CANONICAL_STYLES,
    FIRST_FONT_SPECIFIC_NAME_ID,
    ITALIC,
    canonical_style,
    encode_name,
    remove_records,
    weight_token,
)

# Labels treated as the bold weight
BOLD_SYNONYMS = frozenset({"Bold", "SemiBold", "Semibold"})

# (label, replacement) pairs applied when the requested weight equals the replacement
WEIGHT_SYNONYMS = [
    ("Semibold", "Bold"),
    ("Medium", "Regular"),
    ("Thin", "Light"),
]


@dataclass(frozen=True)
class LabelContext:
    """What a label is reconciled against."""

    style: str
    source_weight_labels: dict[str, str] = field(default_factory=dict)

    @property
    def canonical_style(self) -> str:
        return canonical_style(self.style)

    @property
    def weight(self) -> str:
        return weight_token(self.style)

    @property
    def has_mapping(self) -> bool:
        return bool(self.source_weight_labels)


LabelRule = Callable[[str, LabelContext], "str | None"]


def configured_source_weight(label: str, ctx: LabelContext) -> str | None:
    """Rename the borrowed source weight to the requested weight."""
    source = ctx.source_weight_labels.get(ctx.weight)
    if not source:
        return None
    if label in (source, f"{source} {ITALIC}"):
        return ctx.weight
    return None


def bold_duplicates_style(label: str, ctx: LabelContext) -> str | None:
    """Clear bold labels on Bold / Bold Italic, the style already says it."""
    if BOLD in ctx.canonical_style and label in BOLD_SYNONYMS:
        return ""
    return None


def italic_duplicates_style(label: str, ctx: LabelContext) -> str | None:
    """
    Clear a bare "Italic" label on italic styles.

    Families without weight mapping data keep the label as the only hint
    of the italic axis.
    """
    if ITALIC in ctx.canonical_style and label == ITALIC and ctx.has_mapping:
        return ""
    return None


def intermediate_weight_synonym(label: str, ctx: LabelContext) -> str | None:
    """Normalize weight synonyms for styles outside the four canonical ones."""
    if ctx.style in CANONICAL_STYLES:
        return None
    for synonym, replacement in WEIGHT_SYNONYMS:
        if label == synonym and ctx.weight == replacement:
            return replacement
    return None


LABEL_RULES: list[tuple[str, LabelRule]] = [
    ("configured-source-weight", configured_source_weight),
    ("bold-duplicates-style", bold_duplicates_style),
    ("italic-duplicates-style", italic_duplicates_style),
    ("intermediate-weight-synonym", intermediate_weight_synonym),
]


def reconcile_label(label: str, ctx: LabelContext) -> tuple[str, str | None]:
    """
    Run a label through the rule table.

    The table is re-run on its own output until the label settles, so a
    reconciled label is always a fixed point and reconciling twice changes
    nothing.

    Returns:
        (new label, name of the first matching rule or None if untouched)
    """
    first_rule: str | None = None

    for _ in range(len(LABEL_RULES) + 1):
        for rule_name, rule in LABEL_RULES:
            result = rule(label, ctx)
            if result is not None and result != label:
                first_rule = first_rule or rule_name
                label = result
                break
        else:
            break

    return label, first_rule


def reconcile_stat_labels(font: TTFont, ctx: LabelContext) -> dict[str, int]:
    """
    Rewrite axis value label records (name ID >= 256) in place.

    Returns:
        Number of records changed per rule name
    """
    changed: dict[str, int] = {}
    unencodable = []

    for record in font["name"].names:
        if record.nameID < FIRST_FONT_SPECIFIC_NAME_ID:
            continue
        try:
            label = record.toUnicode()
        except UnicodeDecodeError:
            continue

        new_label, rule_name = reconcile_label(label, ctx)
        if rule_name is None or new_label == label:
            continue

        if not encode_name(record, new_label):
            unencodable.append(record)
            continue
        changed[rule_name] = changed.get(rule_name, 0) + 1

    remove_records(font, unencodable)
    return changed
