"""Pipeline orchestration for the csimple generate flow."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from .compiler import ExpressionCompiler, load_compiler_configuration
from .config import ConfigError, ProjectSettings, load_settings
from .extractors import SiteExtractor, build_extractors
from .logging import get_logger
from .manifest import ManifestBuilder
from .models import CompilerConfiguration, Dialect, ExtractionSite, Fatal, GeneratedUnit, Recovered
from .source_scanner import ScanResult, SourceScanner
from .writer import OutputWriter


class CompilationError(RuntimeError):
    """Raised when a csimple script cannot be compiled; aborts the run."""

    def __init__(self, fatal: Fatal) -> None:
        super().__init__(fatal.describe())
        self.fatal = fatal


@dataclass
class GenerateOutcome:
    """Result of a generate run."""

    sites: List[ExtractionSite] = field(default_factory=list)
    units: List[GeneratedUnit] = field(default_factory=list)
    written: List[Path] = field(default_factory=list)
    manifest_path: Optional[Path] = None
    warnings: List[Recovered] = field(default_factory=list)
    dry_run: bool = False


class GeneratePipeline:
    """Coordinates scanning, extraction, compilation and output for one build."""

    def __init__(
        self,
        scanner: SourceScanner | None = None,
        extractors: Optional[Dict[Dialect, SiteExtractor]] = None,
    ) -> None:
        self.scanner = scanner or SourceScanner()
        self._extractor_overrides = extractors
        self.logger = get_logger("pipeline")

    def run_path(self, path: str, *, dry_run: bool = False, **overrides: object) -> GenerateOutcome:
        """Load project settings from ``path``, apply overrides and run."""
        project_path = Path(path).expanduser().resolve()
        if not project_path.exists():
            raise FileNotFoundError(f"Project path not found: {path}")
        settings = load_settings(project_path).with_overrides(**overrides)
        return self.run(settings, dry_run=dry_run)

    def run(self, settings: ProjectSettings, *, dry_run: bool = False) -> GenerateOutcome:
        """Generate csimple sources and the manifest for ``settings``."""
        self.logger.info("Starting csimple generation for %s", settings.root)
        output_dir = settings.output_dir
        output_resource_dir = settings.output_resource_dir
        if output_dir is None or output_resource_dir is None:
            raise ConfigError("Output directories are not configured")
        configuration = load_compiler_configuration(settings.compiler_config_path)

        scan = self.scanner.scan(
            settings.source_roots,
            test_roots=settings.test_source_roots,
            include_test=settings.include_test,
            include_java=settings.include_java,
            include_xml=settings.include_xml,
            includes=settings.includes,
            excludes=settings.excludes,
        )
        self.logger.debug("Scanner discovered %d candidate files", len(scan))

        sites, warnings = self._extract(scan, settings)
        outcome = GenerateOutcome(sites=sites, warnings=warnings, dry_run=dry_run)
        if not sites:
            self.logger.info("No csimple expressions found")
            return outcome
        self.logger.info("Discovered %d csimple expressions", len(sites))

        # compile everything before the first write so a broken script leaves no output behind
        outcome.units = self._compile(sites, configuration)

        writer = OutputWriter(dry_run=dry_run)
        for unit in outcome.units:
            target = output_dir / unit.relative_path
            if writer.update(target, unit.source):
                self.logger.info("Generated csimple source code file: %s", unit.relative_path.as_posix())

        manifest_builder = ManifestBuilder(writer)
        written_before = len(writer.written)
        outcome.manifest_path = manifest_builder.write(
            output_resource_dir, [unit.identity for unit in outcome.units]
        )
        if len(writer.written) > written_before:
            self.logger.info("Generated csimple resource file: %s", outcome.manifest_path)

        outcome.written = list(writer.written)
        if dry_run:
            self.logger.info("Dry-run completed; %d file(s) would change", len(outcome.written))
        return outcome

    def _extractors(self, settings: ProjectSettings) -> Dict[Dialect, SiteExtractor]:
        if self._extractor_overrides is not None:
            return self._extractor_overrides
        return build_extractors(include_java=settings.include_java, include_xml=settings.include_xml)

    def _extract(
        self, scan: ScanResult, settings: ProjectSettings
    ) -> Tuple[List[ExtractionSite], List[Recovered]]:
        extractors = self._extractors(settings)
        sites: List[ExtractionSite] = []
        warnings: List[Recovered] = []
        for dialect in (Dialect.CODE, Dialect.DOCUMENT):
            extractor = extractors.get(dialect)
            if extractor is None:
                continue
            for source in scan.partitions[dialect]:
                result = extractor.extract(source.path)
                sites.extend(result.sites)
                if result.warning is not None:
                    warnings.append(result.warning)
        return sites, warnings

    def _compile(
        self, sites: Sequence[ExtractionSite], configuration: CompilerConfiguration
    ) -> List[GeneratedUnit]:
        compiler = ExpressionCompiler(configuration)
        units: List[GeneratedUnit] = []
        for result in compiler.compile_all(sites):
            if result.error is not None:
                self.logger.error("%s", result.error.describe())
                raise CompilationError(result.error)
            if result.unit is not None:
                units.append(result.unit)
        return units


__all__ = ["CompilationError", "GenerateOutcome", "GeneratePipeline"]
