"""Merge run: turn a source build output into a subpackage of a target build output.

Steps (each step reports through the StatusReporter; failures are caught at the
step boundary and the run continues where later steps still have their inputs):

1. validate configuration                (ConfigurationError: fatal, nothing touched)
2. optional clean of source/target output (missing directory: reported, continue)
3. build source
4. load source bundle (app.json)          (missing: reported, run stops;
                                           invalid: reported, inject/merge skipped)
5. drop app.json/app.wxss from the source output
6. inject require(<app.js>) into the enter page (locator miss: reported, continue)
7. build target
8. copy source output into target output  (failure: reported, manifest step skipped)
9. merge manifests and write target app.json (parse error: reported, no rollback)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from mpmerge.bundle.io import Bundle, FilesystemError, copy_bundle, load_bundle, remove_files, remove_tree, run_build
from mpmerge.bundle.manifest import MANIFEST_NAME, ManifestError, read_manifest, write_manifest
from mpmerge.core.inject import inject_bootstrap
from mpmerge.core.locate import LocateResult
from mpmerge.core.merge import MISSING, merge_manifest
from mpmerge.core.model import BOOTSTRAP_MODULE, subpackage_root_for
from mpmerge.status import StatusEvent, StatusReporter

logger = logging.getLogger(__name__)

DEFAULT_BUILD_CMD = "npm run build"

# App-level files a subpackage must not carry.
SOURCE_APP_FILES = ("app.wxss", MANIFEST_NAME)


class ConfigurationError(ValueError):
    """Raised when the merge run is missing required settings."""


@dataclass(frozen=True)
class MergeConfig:
    source_output: Optional[Path]
    target_output: Optional[Path]
    source_cmd: Optional[str] = DEFAULT_BUILD_CMD
    target_cmd: Optional[str] = DEFAULT_BUILD_CMD
    enter_page: Optional[str] = None
    clean_source_output: bool = False
    clean_target_output: bool = False
    independent: bool = False
    preload_subpackages: bool = False

    def resolve_outputs(self) -> tuple[Path, Path]:
        """Return the absolute (source_output, target_output) directories.

        Raises:
            ConfigurationError: if either output directory is not set, or the
                enter page is blank.
        """
        if not self.source_output or not self.target_output:
            raise ConfigurationError(
                "both the source output (-o) and the target output (-O) directories are required"
            )
        if self.enter_page is not None and not str(self.enter_page).strip():
            raise ConfigurationError("enter page must not be empty")
        return Path(self.source_output).resolve(), Path(self.target_output).resolve()


@dataclass
class MergeReport:
    events: list[StatusEvent] = field(default_factory=list)
    subpackage_root: str = ""
    injection: Optional[LocateResult] = None
    manifest_written: bool = False

    @property
    def ok(self) -> bool:
        return all(e.ok for e in self.events)


def _clean(path: Path, reporter: StatusReporter) -> None:
    try:
        remove_tree(path)
    except FilesystemError as e:
        logger.debug("clean failed: %s", e)
        reporter.fail(f"failed to delete directory {path}")
        return
    reporter.succeed(f"deleted directory {path}")


def _build(command: Optional[str], output: Path, label: str, reporter: StatusReporter) -> None:
    if not command or not command.strip():
        return
    project_dir = output.parent
    try:
        proc = run_build(command, project_dir)
    except OSError as e:
        logger.debug("build failed to start: %s", e)
        reporter.fail(f"{label} directory {project_dir} build failed: {e}")
        return
    if proc.returncode == 0:
        reporter.succeed(f"{label} directory {project_dir} built")
    else:
        reporter.fail(f"{label} directory {project_dir} build failed (exit code {proc.returncode})")


def _resolve_enter_page(bundle: Bundle, enter_page: Optional[str], reporter: StatusReporter) -> Path:
    if enter_page:
        page = bundle.page_path(enter_page)
        reporter.succeed(f"enter page: {page}")
        return page
    # Default to the first registered page.
    pages = bundle.pages
    if not pages:
        raise ManifestError("app.json: 'pages' is empty, no enter page to inject into")
    page = bundle.page_path(pages[0])
    reporter.succeed(f"enter page (first page of app.json): {page}")
    return page


def _inject(bundle: Bundle, enter_page: Optional[str], reporter: StatusReporter) -> Optional[LocateResult]:
    try:
        page = _resolve_enter_page(bundle, enter_page, reporter)
        result = inject_bootstrap(page, bundle.root, BOOTSTRAP_MODULE)
    except (ValueError, OSError) as e:
        logger.debug("injection failed: %s", e)
        reporter.fail(f"bootstrap injection failed: {e}")
        return None
    if result.found:
        reporter.succeed(f"subpackage entry patched: require({result.relative_path!r})")
    else:
        reporter.fail(f"bootstrap injection failed: {BOOTSTRAP_MODULE} not found above {page}")
    return result


def _merge_manifests(
    bundle: Bundle,
    target_output: Path,
    reporter: StatusReporter,
    *,
    independent: bool,
    propagate_preload: bool,
) -> bool:
    target_path = target_output / MANIFEST_NAME
    preload_rule = bundle.manifest.get("preloadRule", MISSING)
    try:
        pages = bundle.pages
        target_manifest = read_manifest(target_path)
        merged = merge_manifest(
            pages,
            preload_rule,
            target_manifest,
            subpackage_root=bundle.subpackage_root,
            independent=independent,
            propagate_preload=propagate_preload,
        )
        write_manifest(target_path, merged)
    except (ValueError, OSError) as e:
        logger.debug("manifest merge failed: %s", e)
        reporter.fail(f"page registration failed: {e}")
        return False

    if propagate_preload:
        if preload_rule is MISSING:
            reporter.succeed("preload rule removed: source app.json has none")
        else:
            reporter.succeed(f"preload rule copied: {preload_rule!r}")
    for page in pages:
        reporter.succeed(f"page registered: {bundle.subpackage_root}{page}")
    return True


def run_merge(config: MergeConfig, reporter: Optional[StatusReporter] = None) -> MergeReport:
    """Run one merge to completion and return its report.

    Raises:
        ConfigurationError: if the configuration is incomplete. Raised before
            anything on disk is touched.
    """
    if reporter is None:
        reporter = StatusReporter(echo=False)
    report = MergeReport(events=reporter.events)

    source_output, target_output = config.resolve_outputs()
    logger.debug("source output: %s", source_output)
    logger.debug("target output: %s", target_output)

    if config.clean_source_output:
        _clean(source_output, reporter)
    if config.clean_target_output:
        _clean(target_output, reporter)

    _build(config.source_cmd, source_output, "source", reporter)

    # The manifest is held in memory; app.json is removed from the source below.
    bundle: Optional[Bundle]
    try:
        bundle = load_bundle(source_output)
    except ValueError as e:
        logger.debug("source manifest invalid: %s", e)
        reporter.fail(f"invalid source manifest: {e}")
        bundle = None
    except OSError as e:
        logger.debug("source manifest unreadable: %s", e)
        reporter.fail(f"cannot read source manifest {source_output / MANIFEST_NAME}")
        return report

    for removed in remove_files(source_output, SOURCE_APP_FILES):
        logger.debug("removed %s from source output", removed)

    if bundle is not None:
        report.injection = _inject(bundle, config.enter_page, reporter)

    _build(config.target_cmd, target_output, "target", reporter)

    report.subpackage_root = subpackage_root_for(source_output)
    try:
        dest = copy_bundle(source_output, target_output)
    except FilesystemError as e:
        logger.debug("copy failed: %s", e)
        reporter.fail(f"failed to copy {source_output} to {target_output}")
        return report
    reporter.succeed(f"copied {source_output} to {dest}")

    if bundle is not None:
        report.manifest_written = _merge_manifests(
            bundle,
            target_output,
            reporter,
            independent=config.independent,
            propagate_preload=config.preload_subpackages,
        )

    reporter.succeed("merge complete")
    return report
