"""
Declarative font family configuration.

The configuration is read once per invocation from JSON and exposed as
frozen dataclasses. Nothing in the pipeline mutates it, so it can be shared
freely between build targets.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

from bon_fonts.config.instances import WEIGHT_NAMES, BuildTarget, file_style_name
from bon_fonts.config.paths import CONFIG_FILE, KOREAN_FAMILY, KOREAN_SOURCE_DIR, OUTPUT_PREFIX
from bon_fonts.core.errors import ConfigurationError

DEFAULT_MONO_WIDTH = 1200


@dataclass(frozen=True)
class KoreanAdjustments:
    """Geometry and width normalization applied to Korean glyphs."""

    scale_to_match_height: bool = False
    scale_x: float = 1.0
    scale_y: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0
    force_mono_width: bool = False
    use_native_width: bool = False
    target_width: int | None = None
    center_in_cell: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "KoreanAdjustments":
        target_width = data.get("targetWidth")
        return cls(
            scale_to_match_height=bool(data.get("scaleToMatchHeight", False)),
            scale_x=float(data.get("scaleX") or 1.0),
            scale_y=float(data.get("scaleY") or 1.0),
            offset_x=float(data.get("offsetX") or 0.0),
            offset_y=float(data.get("offsetY") or 0.0),
            force_mono_width=bool(data.get("forceMonoWidth", False)),
            use_native_width=bool(data.get("useNativeWidth", False)),
            target_width=int(target_width) if target_width else None,
            center_in_cell=bool(data.get("centerInCell", False)),
        )


@dataclass(frozen=True)
class WeightConfig:
    """
    Per-weight source selection.

    A weight may borrow glyphs from a differently named source weight on
    either side (e.g., output "Bold" built from Latin "SemiBold").
    """

    available: bool = True
    latin_source: str | None = None
    korean_source: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "WeightConfig":
        return cls(
            available=bool(data.get("available", True)),
            latin_source=data.get("latinSource"),
            korean_source=data.get("koreanSource"),
        )


@dataclass(frozen=True)
class FontConfig:
    """Configuration of one Latin font family."""

    key: str
    display_name: str
    source_path: Path
    weights: dict[str, WeightConfig]
    family_name: str | None = None
    has_italic: bool = False
    is_variable: bool = False
    variable_font_files: dict[str, str] = field(default_factory=dict)
    mono_width: int = DEFAULT_MONO_WIDTH
    korean_adjustments: KoreanAdjustments = field(default_factory=KoreanAdjustments)

    @classmethod
    def from_dict(cls, key: str, data: dict) -> "FontConfig":
        weights = {
            name: WeightConfig.from_dict(value or {})
            for name, value in data["weights"].items()
        }
        unknown = [name for name in weights if name not in WEIGHT_NAMES]
        unknown += [
            source
            for w in weights.values()
            for source in (w.latin_source, w.korean_source)
            if source and source not in WEIGHT_NAMES
        ]
        if unknown:
            raise ConfigurationError(
                f"Font {key} declares unknown weights: {', '.join(unknown)}"
            )

        variable_font_files = dict(data.get("variableFontFiles") or {})
        if data.get("isVariable") and not variable_font_files.get("regular"):
            raise ConfigurationError(f"Font {key} declares no variable font file")

        return cls(
            key=key,
            display_name=data["displayName"],
            source_path=Path(data["sourcePath"]),
            weights=weights,
            family_name=data.get("familyName"),
            has_italic=bool(data.get("hasItalic", False)),
            is_variable=bool(data.get("isVariable", False)),
            variable_font_files=variable_font_files,
            mono_width=int(data.get("monoWidth") or DEFAULT_MONO_WIDTH),
            korean_adjustments=KoreanAdjustments.from_dict(
                data.get("koreanAdjustments") or {}
            ),
        )

    def weight(self, name: str) -> WeightConfig:
        """
        Get the configuration of a weight.

        Raises:
            ConfigurationError: If the weight is not declared
        """
        try:
            return self.weights[name]
        except KeyError:
            raise ConfigurationError(
                f"Weight {name} is not configured for font {self.key}"
            ) from None

    @property
    def available_weights(self) -> list[str]:
        """Declared weights that can be built, in declaration order."""
        return [name for name, w in self.weights.items() if w.available]

    def latin_weight(self, weight: str) -> str:
        """Latin source weight used for an output weight."""
        return self.weight(weight).latin_source or weight

    def korean_weight(self, weight: str) -> str:
        """Korean source weight used for an output weight."""
        return self.weight(weight).korean_source or weight

    def source_weight_labels(self) -> dict[str, str]:
        """
        Output weight -> Latin source weight, for weights that borrow glyphs.

        Empty when the family builds every weight from its own source.
        """
        return {
            name: w.latin_source
            for name, w in self.weights.items()
            if w.latin_source and w.latin_source != name
        }

    def static_latin_path(self, weight: str, italic: bool) -> Path:
        """Path of the static Latin source for an output weight."""
        latin_weight = self.latin_weight(weight)
        family = self.family_name or self.key
        return self.source_path / f"{family}-{file_style_name(latin_weight, italic)}.ttf"

    def variable_latin_path(self, italic: bool) -> Path:
        """
        Path of the continuous-weight Latin source.

        Raises:
            ConfigurationError: If the family is not variable or has no file
        """
        if not self.is_variable:
            raise ConfigurationError(f"Font {self.key} is not configured as a variable font")

        file_name = self.variable_font_files.get("italic") if italic else None
        file_name = file_name or self.variable_font_files.get("regular")
        if not file_name:
            raise ConfigurationError(f"Font {self.key} declares no variable font file")
        return self.source_path / file_name


@dataclass(frozen=True)
class BuildConfig:
    """Top-level build configuration."""

    fonts: dict[str, FontConfig]
    output_prefix: str = OUTPUT_PREFIX
    korean_source_path: Path = KOREAN_SOURCE_DIR
    korean_family: str = KOREAN_FAMILY

    @classmethod
    def from_dict(cls, data: dict) -> "BuildConfig":
        korean = data.get("korean") or {}
        return cls(
            fonts={
                key: FontConfig.from_dict(key, value)
                for key, value in data["fonts"].items()
            },
            output_prefix=data.get("outputPrefix", OUTPUT_PREFIX),
            korean_source_path=Path(korean.get("sourcePath", KOREAN_SOURCE_DIR)),
            korean_family=korean.get("familyName", KOREAN_FAMILY),
        )

    def font(self, key: str) -> FontConfig:
        """
        Get the configuration of a font family.

        Raises:
            ConfigurationError: If the family is not configured
        """
        try:
            return self.fonts[key]
        except KeyError:
            raise ConfigurationError(f"Font {key} is not configured") from None

    def korean_source(self, weight: str, italic: bool) -> Path:
        """Path of the Korean donor font for a Korean source weight."""
        return self.korean_source_path / f"{self.korean_family}-{file_style_name(weight, italic)}.ttf"

    def family_name(self, key: str) -> str:
        """Output family name (e.g., "Bon JetBrains Mono")."""
        return f"{self.output_prefix} {self.font(key).display_name}"


def load_config(path: Path = CONFIG_FILE) -> BuildConfig:
    """
    Load the build configuration from JSON.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return BuildConfig.from_dict(data)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e!r}") from e


def resolve_targets(
    config: BuildConfig,
    font_keys: list[str] | None = None,
    weights: list[str] | None = None,
    italic: bool | None = None,
) -> list[BuildTarget]:
    """
    Expand a build request into build targets.

    Args:
        config: Build configuration
        font_keys: Families to build (default: all)
        weights: Weights to build (default: every available weight)
        italic: Only upright (False), only italic (True), or both (None)

    Returns:
        Targets in configuration order

    Raises:
        ConfigurationError: If a requested family or weight is not configured
            or not available
    """
    targets: list[BuildTarget] = []

    for key in font_keys or list(config.fonts):
        font_config = config.font(key)

        if weights:
            for name in weights:
                if not font_config.weight(name).available:
                    raise ConfigurationError(
                        f"Weight {name} is not available for font {key}"
                    )
            selected = list(weights)
        else:
            selected = font_config.available_weights

        if italic and not font_config.has_italic:
            raise ConfigurationError(f"Font {key} has no italic")

        for name in selected:
            if italic is not True:
                targets.append(BuildTarget(key, name, False))
            if italic is not False and font_config.has_italic:
                targets.append(BuildTarget(key, name, True))

    return targets
