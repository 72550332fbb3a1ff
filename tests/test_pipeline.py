from __future__ import annotations

import json
from pathlib import Path

import pytest

from mpmerge.pipeline import ConfigurationError, MergeConfig, run_merge
from mpmerge.status import StatusReporter

from conftest import make_bundle, write_text

SOURCE_MANIFEST = {
    "pages": ["pages/a/a", "pages/b/b"],
    "window": {"navigationBarTitleText": "source"},
    "preloadRule": {"pages/a/a": {"network": "all", "packages": ["__APP__"]}},
}
TARGET_MANIFEST = {
    "pages": ["index"],
    "window": {"navigationBarTitleText": "target"},
    "preloadRule": {"index": {"packages": ["other/"]}},
}


def _config(tmp_path: Path, **overrides) -> MergeConfig:
    values = dict(
        source_output=tmp_path / "src-project" / "sourceBundle",
        target_output=tmp_path / "tgt-project" / "dist",
        source_cmd="",
        target_cmd="",
    )
    values.update(overrides)
    return MergeConfig(**values)


def _setup(tmp_path: Path) -> tuple[Path, Path]:
    source = make_bundle(tmp_path / "src-project" / "sourceBundle", SOURCE_MANIFEST)
    target = make_bundle(tmp_path / "tgt-project" / "dist", TARGET_MANIFEST)
    return source, target


def _messages(reporter: StatusReporter, ok: bool) -> list[str]:
    return [e.message for e in reporter.events if e.ok is ok]


def test_run_merge_end_to_end(tmp_path: Path) -> None:
    source, target = _setup(tmp_path)
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path), reporter)

    assert report.ok, reporter.failures
    assert report.manifest_written
    assert report.subpackage_root == "sourceBundle/"
    assert report.injection is not None and report.injection.relative_path == "../../app.js"

    # source output lost its app-level manifest/stylesheet
    assert not (source / "app.json").exists()
    assert not (source / "app.wxss").exists()

    copied = target / "sourceBundle"
    assert (copied / "pages" / "a" / "a.js").read_text(encoding="utf-8") == '"use strict";require("../../app.js");Page({});'
    assert (copied / "pages" / "b" / "b.js").read_text(encoding="utf-8") == '"use strict";Page({});'
    assert (copied / "app.js").is_file()
    assert not (copied / "app.json").exists()

    merged = json.loads((target / "app.json").read_text(encoding="utf-8"))
    assert merged["pages"] == ["index"]
    assert merged["window"] == TARGET_MANIFEST["window"]
    assert merged["preloadRule"] == TARGET_MANIFEST["preloadRule"]
    assert merged["subPackages"] == [
        {"root": "sourceBundle/", "pages": ["pages/a/a", "pages/b/b"], "independent": False},
    ]

    ok = _messages(reporter, True)
    assert "page registered: sourceBundle/pages/a/a" in ok
    assert "page registered: sourceBundle/pages/b/b" in ok
    assert ok[-1] == "merge complete"


def test_run_merge_enter_page_independent_and_preload(tmp_path: Path) -> None:
    source, target = _setup(tmp_path)

    report = run_merge(
        _config(tmp_path, enter_page="pages/b/b", independent=True, preload_subpackages=True),
    )

    assert report.ok
    copied = target / "sourceBundle"
    assert (copied / "pages" / "a" / "a.js").read_text(encoding="utf-8") == '"use strict";Page({});'
    assert (copied / "pages" / "b" / "b.js").read_text(encoding="utf-8").startswith('"use strict";require("../../app.js");')

    merged = json.loads((target / "app.json").read_text(encoding="utf-8"))
    assert merged["subPackages"][-1]["independent"] is True
    assert merged["preloadRule"] == SOURCE_MANIFEST["preloadRule"]


def test_run_merge_missing_outputs_is_configuration_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        run_merge(MergeConfig(source_output=None, target_output=tmp_path))
    with pytest.raises(ConfigurationError):
        run_merge(MergeConfig(source_output=tmp_path, target_output=None))


def test_run_merge_locator_miss_is_not_fatal(tmp_path: Path) -> None:
    source = make_bundle(tmp_path / "src-project" / "sourceBundle", SOURCE_MANIFEST, app_js=False)
    target = make_bundle(tmp_path / "tgt-project" / "dist", TARGET_MANIFEST)
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path), reporter)

    assert not report.ok
    assert report.injection is not None and report.injection.found is False
    assert any("bootstrap injection failed" in m for m in _messages(reporter, False))
    assert report.manifest_written
    assert (target / "sourceBundle" / "pages" / "a" / "a.js").read_text(encoding="utf-8") == '"use strict";Page({});'
    merged = json.loads((target / "app.json").read_text(encoding="utf-8"))
    assert merged["subPackages"][0]["root"] == "sourceBundle/"


def test_run_merge_target_manifest_parse_error_keeps_copy(tmp_path: Path) -> None:
    _, target = _setup(tmp_path)
    write_text(target / "app.json", "{not json")
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path), reporter)

    assert not report.manifest_written
    assert any("page registration failed" in m for m in _messages(reporter, False))
    # no rollback of the copy
    assert (target / "sourceBundle" / "pages" / "a" / "a.js").is_file()
    assert (target / "app.json").read_text(encoding="utf-8") == "{not json"


def test_run_merge_missing_source_manifest_stops(tmp_path: Path) -> None:
    source, target = _setup(tmp_path)
    (source / "app.json").unlink()
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path), reporter)

    assert not report.ok
    assert not (target / "sourceBundle").exists()
    assert any("cannot read source manifest" in m for m in _messages(reporter, False))


def test_run_merge_clean_source_without_rebuild_stops(tmp_path: Path) -> None:
    source, _ = _setup(tmp_path)
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path, clean_source_output=True), reporter)

    assert _messages(reporter, True)[0] == f"deleted directory {source.resolve()}"
    assert not source.exists()
    # no build command was set, so there is no source manifest to read
    assert not report.ok
    assert any("cannot read source manifest" in m for m in _messages(reporter, False))


def test_run_merge_clean_target_missing_continues(tmp_path: Path) -> None:
    _setup(tmp_path)
    missing_target = tmp_path / "tgt-project" / "fresh"
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path, clean_target_output=True, target_output=missing_target), reporter)

    failed = _messages(reporter, False)
    assert failed[0] == f"failed to delete directory {missing_target.resolve()}"
    # copy still happens; manifest merge fails on the absent target app.json
    assert (missing_target / "sourceBundle" / "pages" / "a" / "a.js").is_file()
    assert not report.manifest_written


def test_run_merge_reports_build_failure(tmp_path: Path) -> None:
    _setup(tmp_path)
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path, source_cmd="exit 3"), reporter)

    assert any("build failed (exit code 3)" in m for m in _messages(reporter, False))
    assert report.manifest_written


def test_run_merge_preload_without_source_rule_drops_target_rule(tmp_path: Path) -> None:
    source_manifest = {k: v for k, v in SOURCE_MANIFEST.items() if k != "preloadRule"}
    make_bundle(tmp_path / "src-project" / "sourceBundle", source_manifest)
    target = make_bundle(tmp_path / "tgt-project" / "dist", TARGET_MANIFEST)
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path, preload_subpackages=True), reporter)

    assert report.ok
    merged = json.loads((target / "app.json").read_text(encoding="utf-8"))
    assert "preloadRule" not in merged
    assert "null" not in (target / "app.json").read_text(encoding="utf-8")
    assert "preload rule removed: source app.json has none" in _messages(reporter, True)


def test_run_merge_invalid_source_manifest_still_copies(tmp_path: Path) -> None:
    source, target = _setup(tmp_path)
    write_text(source / "app.json", "{broken")
    reporter = StatusReporter(echo=False)

    report = run_merge(_config(tmp_path), reporter)

    assert not report.ok
    assert report.injection is None
    assert not report.manifest_written
    assert any(m.startswith("invalid source manifest") for m in _messages(reporter, False))
    assert (target / "sourceBundle" / "pages" / "a" / "a.js").read_text(encoding="utf-8") == '"use strict";Page({});'
    assert json.loads((target / "app.json").read_text(encoding="utf-8")) == TARGET_MANIFEST


def test_merge_config_resolve_outputs_returns_absolute_paths(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    source_output, target_output = MergeConfig(source_output=Path("a/out"), target_output=Path("b/out")).resolve_outputs()

    assert source_output == (tmp_path / "a" / "out").resolve()
    assert target_output == (tmp_path / "b" / "out").resolve()
    with pytest.raises(ConfigurationError, match="enter page"):
        MergeConfig(source_output=tmp_path, target_output=tmp_path, enter_page=" ").resolve_outputs()
