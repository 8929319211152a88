import asyncio
import json
from pathlib import Path

import pytest

import codependence.core as core
from codependence.config import build_options
from codependence.errors import ConfigurationError, ManifestReadError
from codependence.events import EventRecorder
from codependence.report import report
from codependence.diff import diff_manifest
from codependence.models import Manifest


def _write_json(path: Path, payload: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=4), encoding="utf-8")


async def _no_lookup(name: str) -> str:
    raise AssertionError(f"unexpected lookup for {name}")


def _options(root: Path, **overrides):
    config = {"rootDir": str(root), "codependencies": [{"foo": "1.2.0"}]}
    config.update(overrides)
    return build_options(config=config)


def test_report_emits_one_line_per_candidate() -> None:
    manifest = Manifest(path=Path("package.json"), data={"name": "x", "dependencies": {"foo": "^1.0.0"}})
    lists = diff_manifest(manifest, {"foo": "1.2.0"})

    recorder = EventRecorder()
    assert report(manifest.name, lists, emit=recorder) is True
    assert recorder.messages("warning") == [
        "foo version is not correct. Found ^1.0.0 and should be 1.2.0"
    ]
    assert recorder.events[0].source == "x"

    silent = EventRecorder()
    assert report(manifest.name, lists, silent=True, emit=silent) is True
    assert silent.events == []


def test_mismatch_without_update_fails(tmp_path: Path) -> None:
    manifest = tmp_path / "package.json"
    _write_json(manifest, {"name": "x", "dependencies": {"foo": "^1.0.0"}})
    before = manifest.read_text(encoding="utf-8")

    recorder = EventRecorder()
    result = core.run(_options(tmp_path).with_cli(), query_latest=_no_lookup, emit=recorder)

    assert result.manifests_checked == 1
    assert result.manifests_needing_update == (manifest,)
    assert result.failed
    assert result.exit_code == 1
    assert manifest.read_text(encoding="utf-8") == before
    assert len(recorder.messages("warning")) == 1
    assert recorder.events[-1].level == "error"


def test_failure_exit_code_only_in_cli_mode(tmp_path: Path) -> None:
    _write_json(tmp_path / "package.json", {"name": "x", "dependencies": {"foo": "^1.0.0"}})
    result = core.run(_options(tmp_path), query_latest=_no_lookup)
    assert result.failed
    assert result.exit_code == 0


def test_clean_pass(tmp_path: Path) -> None:
    _write_json(tmp_path / "package.json", {"name": "x", "dependencies": {"foo": "^1.0.0"}})
    recorder = EventRecorder()
    result = core.run(
        _options(tmp_path, codependencies=[{"foo": "1.0.0"}]).with_cli(),
        query_latest=_no_lookup,
        emit=recorder,
    )
    assert not result.needs_update
    assert result.exit_code == 0
    assert recorder.messages("info") == ["no dependency issues found!"]


def test_update_rewrites_manifest(tmp_path: Path) -> None:
    manifest = tmp_path / "package.json"
    _write_json(
        manifest,
        {
            "name": "x",
            "version": "1.0.0",
            "dependencies": {"foo": "^1.0.0", "other": "~2.0.0"},
            "devDependencies": {"foo": "1.2.0"},
        },
    )

    result = core.run(_options(tmp_path, update=True).with_cli(), query_latest=_no_lookup)

    assert result.updated and not result.failed
    assert result.exit_code == 0
    assert result.written == (manifest,)
    expected = {
        "name": "x",
        "version": "1.0.0",
        "dependencies": {"foo": "1.2.0", "other": "~2.0.0"},
        "devDependencies": {"foo": "1.2.0"},
    }
    assert manifest.read_text(encoding="utf-8") == json.dumps(expected, indent=2) + "\n"
    assert "path" not in json.loads(manifest.read_text(encoding="utf-8"))


def test_testing_mode_skips_write(tmp_path: Path) -> None:
    manifest = tmp_path / "package.json"
    _write_json(manifest, {"name": "x", "dependencies": {"foo": "^1.0.0"}})
    before = manifest.read_text(encoding="utf-8")

    recorder = EventRecorder()
    result = core.run(
        _options(tmp_path, update=True, isTesting=True), query_latest=_no_lookup, emit=recorder
    )

    assert result.needs_update and not result.failed
    assert result.written == ()
    assert manifest.read_text(encoding="utf-8") == before
    assert any("skipped writing" in message for message in recorder.messages("info"))


def test_scans_every_matched_manifest(tmp_path: Path) -> None:
    _write_json(tmp_path / "package.json", {"name": "root", "dependencies": {"foo": "1.2.0"}})
    _write_json(tmp_path / "packages" / "a" / "package.json", {"name": "a", "peerDependencies": {"foo": "~1.1.0"}})
    _write_json(tmp_path / "packages" / "b" / "package.json", {"name": "b"})
    _write_json(tmp_path / "node_modules" / "foo" / "package.json", {"name": "foo", "dependencies": {"foo": "0.0.1"}})

    async def lookup(name: str) -> str:
        return "9.9.9\n"

    result = core.run(
        _options(tmp_path, files=["**/package.json"], codependencies=[{"foo": "1.2.0"}, "bar"]),
        query_latest=lookup,
    )
    assert result.manifests_checked == 3
    assert result.manifests_needing_update == (tmp_path / "packages" / "a" / "package.json",)


def test_missing_codependencies_fails_before_reading(tmp_path: Path, monkeypatch) -> None:
    def explode(*args, **kwargs):
        raise AssertionError("manifests must not be read")

    monkeypatch.setattr(core, "load_manifests", explode)
    with pytest.raises(ConfigurationError):
        core.run(build_options(config={"rootDir": str(tmp_path)}), query_latest=_no_lookup)


def test_unreadable_manifest_propagates(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{broken", encoding="utf-8")
    with pytest.raises(ManifestReadError):
        core.run(_options(tmp_path), query_latest=_no_lookup)


def test_default_lookup_comes_from_options(tmp_path: Path, monkeypatch) -> None:
    _write_json(tmp_path / "package.json", {"name": "x", "dependencies": {"baz": "^3.0.0"}})
    requested: list[tuple] = []

    async def fake_lookup(name: str) -> str:
        return "3.0.0\n"

    def fake_get_lookup(kind, registry):
        requested.append((kind, registry))
        return fake_lookup

    monkeypatch.setattr(core, "get_lookup", fake_get_lookup)
    options = _options(tmp_path, codependencies=["baz"], lookup="registry", registry="https://reg.example")
    result = asyncio.run(core.run_async(options))
    assert requested == [("registry", "https://reg.example")]
    assert not result.needs_update
