"""
Build pipeline orchestration.

Each build target runs its steps in order:
  1. instance  - Extract the Latin weight instance (variable families only)
  2. korean    - Extract and normalize the Korean subset
  3. merge     - Merge the Korean glyphs into the Latin font
  4. metadata  - Reconcile naming, style flags and capabilities
  5. write     - Write the output font atomically

Targets share nothing but the read-only configuration, so they run
sequentially or in worker processes. A failing target is recorded and
never stops its siblings.
"""

import shutil
import sys
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from bon_fonts.config.fonts import BuildConfig
from bon_fonts.config.instances import BuildTarget
from bon_fonts.config.paths import BUILD_DIR, KOREAN_DIR, OUT_DIR, VARIABLE_INSTANCES_DIR
from bon_fonts.core.errors import BuildError, ConfigurationError
from bon_fonts.core.font_io import log_font_summary, read_font, write_font
from bon_fonts.operations.korean import extract_korean
from bon_fonts.operations.merge import merge_glyph_sets
from bon_fonts.operations.metadata import MetadataRequest, reconcile_metadata
from bon_fonts.operations.variable import save_variable_instance
from bon_fonts.utils.logging import logger

DEFAULT_VERSION = "1.000"


@dataclass
class TargetResult:
    """Outcome of one build target."""

    target: BuildTarget
    output: Path
    success: bool = False
    degraded: bool = False
    warnings: list[str] = field(default_factory=list)
    error: str | None = None


def output_path(config: BuildConfig, target: BuildTarget, out_dir: Path = OUT_DIR) -> Path:
    """Output font path of a target: out/<key>/<prefix>-<key>-<Style>.ttf."""
    return out_dir / target.font_key / target.output_name(config.output_prefix)


def intermediate_dirs(build_dir: Path) -> tuple[Path, Path]:
    """(variable instance dir, Korean subset dir) under a build directory."""
    return build_dir / VARIABLE_INSTANCES_DIR.name, build_dir / KOREAN_DIR.name


def build_target(
    config: BuildConfig,
    target: BuildTarget,
    version: str = DEFAULT_VERSION,
    build_dir: Path = BUILD_DIR,
    out_dir: Path = OUT_DIR,
) -> TargetResult:
    """
    Build one hybrid font.

    Args:
        config: Build configuration
        target: Family, weight and italic flag to build
        version: Version string stamped into the font
        build_dir: Directory for intermediate fonts
        out_dir: Directory for output fonts

    Returns:
        Result of the successful target

    Raises:
        BuildError: If any step fails
    """
    font_config = config.font(target.font_key)
    instance_dir, korean_dir = intermediate_dirs(build_dir)
    result = TargetResult(target, output_path(config, target, out_dir))

    logger.info(f"Building {target}")

    if font_config.is_variable:
        latin_path = instance_dir / target.intermediate_name
        instance = save_variable_instance(
            font_config.variable_latin_path(target.italic),
            latin_path,
            font_config.latin_weight(target.weight),
            target.italic,
        )
        result.degraded = instance.degraded
        result.warnings.extend(instance.warnings)
    else:
        latin_path = font_config.static_latin_path(target.weight, target.italic)

    korean_path = korean_dir / target.intermediate_name
    base = read_font(latin_path)
    try:
        report = extract_korean(
            config.korean_source(font_config.korean_weight(target.weight), target.italic),
            korean_path,
            font_config.korean_adjustments,
            font_config.mono_width,
            units_per_em=base["head"].unitsPerEm,
        )
        result.warnings.extend(report.warnings)

        donor = read_font(korean_path)
        try:
            merged, _ = merge_glyph_sets(base, donor)
        finally:
            donor.close()
    finally:
        base.close()

    request = MetadataRequest(
        family_name=config.family_name(target.font_key),
        style_name=target.style_name,
        version=version,
        weight_class=target.weight_class,
        source_weight_labels=font_config.source_weight_labels(),
    )
    final = reconcile_metadata(merged, request)

    write_font(result.output, final)
    log_font_summary(result.output)

    result.success = True
    return result


def run_target(
    config: BuildConfig,
    target: BuildTarget,
    version: str = DEFAULT_VERSION,
    build_dir: Path = BUILD_DIR,
    out_dir: Path = OUT_DIR,
) -> TargetResult:
    """
    Build one target, recording a failure instead of raising it.

    Raises:
        ConfigurationError: The configuration cannot describe this target;
            this stops the whole invocation
    """
    try:
        return build_target(config, target, version, build_dir, out_dir)
    except ConfigurationError:
        raise
    except BuildError as e:
        logger.error(f"{target} failed: {e}")
        return TargetResult(target, output_path(config, target, out_dir), error=str(e))
    except Exception as e:
        logger.error(f"{target} failed unexpectedly: {e!r}")
        return TargetResult(target, output_path(config, target, out_dir), error=repr(e))


def dedupe_targets(
    config: BuildConfig, targets: list[BuildTarget], out_dir: Path = OUT_DIR
) -> list[BuildTarget]:
    """Drop targets whose output path an earlier target already writes."""
    seen: set[Path] = set()
    unique: list[BuildTarget] = []
    for target in targets:
        path = output_path(config, target, out_dir)
        if path in seen:
            logger.warning(f"Skipping duplicate target {target}")
            continue
        seen.add(path)
        unique.append(target)
    return unique


def run_targets(
    config: BuildConfig,
    targets: list[BuildTarget],
    version: str = DEFAULT_VERSION,
    jobs: int = 1,
    build_dir: Path = BUILD_DIR,
    out_dir: Path = OUT_DIR,
) -> list[TargetResult]:
    """
    Build targets sequentially (jobs=1) or in worker processes.

    Returns:
        One result per unique target, in request order

    Raises:
        ConfigurationError: If a target cannot be resolved from the
            configuration; remaining targets are not built
    """
    targets = dedupe_targets(config, targets, out_dir)
    total = len(targets)

    if jobs <= 1 or total <= 1:
        results = []
        for i, target in enumerate(targets, 1):
            logger.info(f"[{i}/{total}] {target}")
            results.append(run_target(config, target, version, build_dir, out_dir))
        return results

    logger.info(f"Building {total} targets with {jobs} workers")
    with ProcessPoolExecutor(max_workers=jobs) as executor:
        futures = [
            executor.submit(run_target, config, target, version, build_dir, out_dir)
            for target in targets
        ]
        try:
            return [future.result() for future in futures]
        except ConfigurationError:
            for future in futures:
                future.cancel()
            raise


def summarize(results: list[TargetResult]) -> bool:
    """
    Log a build summary.

    Returns:
        True if every target succeeded
    """
    succeeded = [r for r in results if r.success]
    failed = [r for r in results if not r.success]
    degraded = [r for r in succeeded if r.degraded]

    logger.info(f"Built {len(succeeded)}/{len(results)} fonts")
    for r in degraded:
        logger.warning(f"  Degraded: {r.target} (default instance used)")
    for r in failed:
        logger.error(f"  Failed: {r.target}: {r.error}")

    return not failed


def run_all(
    config: BuildConfig,
    targets: list[BuildTarget],
    version: str = DEFAULT_VERSION,
    jobs: int = 1,
) -> None:
    """
    Build targets and exit non-zero if any of them failed.

    Args:
        config: Build configuration
        targets: Targets to build
        version: Version string stamped into every font
        jobs: Number of worker processes

    Raises:
        ConfigurationError: If a target cannot be resolved from the configuration
    """
    if not targets:
        logger.warning("Nothing to build")
        return

    results = run_targets(config, targets, version, jobs)
    if not summarize(results):
        sys.exit(1)

    logger.info("All targets completed successfully")


def clean(full: bool = False) -> None:
    """
    Remove build artifacts.

    Args:
        full: Also remove the out/ directory
    """
    directories = [BUILD_DIR, OUT_DIR] if full else [BUILD_DIR]
    for directory in directories:
        if directory.exists():
            shutil.rmtree(directory)
            logger.info(f"Removed {directory}/")
