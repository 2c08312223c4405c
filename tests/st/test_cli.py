"""命令行端到端测试"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

import assetkit.services.container as container_mod
from assetkit.cli import main


@pytest.fixture()
def runner(container, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(container_mod, "_global", container)
    # 日志配置会替换根 handler，测试中保持 pytest 的捕获
    monkeypatch.setattr("assetkit.cli.setup_logging_from_env", lambda: None)
    return CliRunner()


@pytest.fixture()
def alpha(fake_registry) -> None:
    fake_registry.add_package("alpha", ["2.0.0-rc.1", "1.5.0", "1.0.0"], latest="1.5.0")
    for v in ("2.0.0-rc.1", "1.5.0", "1.0.0"):
        fake_registry.add_flat("alpha", v, ["alpha.min.js", "alpha.js", "alpha.min.css"])


class TestCreateCommand:
    def test_create_prints_descriptor(self, runner: CliRunner, alpha, storage_root: Path) -> None:
        result = runner.invoke(main, ["create", "alpha"])
        assert result.exit_code == 0, result.output
        assert "version: 1.5.0" in result.output
        assert "src: alpha-1.5.0" in result.output
        assert "- js/alpha.min.js" in result.output
        assert (storage_root / "alpha-1.5.0" / "css" / "alpha.min.css").exists()

    def test_create_cdn_full(self, runner: CliRunner, alpha) -> None:
        result = runner.invoke(main, ["create", "alpha", "--cdn", "--full", "--version", "1.0.0"])
        assert result.exit_code == 0, result.output
        assert "source_mode: remote" in result.output
        assert "- alpha.js" in result.output

    def test_error_has_code(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["create", "nope"])
        assert result.exit_code == 1
        assert "[LIBRARY_NOT_FOUND]" in result.output


class TestUpdateCommand:
    def test_dry_run(self, runner: CliRunner, alpha) -> None:
        runner.invoke(main, ["create", "alpha"])
        result = runner.invoke(main, ["update", "alpha", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "upgrade: alpha 1.5.0 -> 2.0.0-rc.1 (latest 2.0.0-rc.1)" in result.output

    def test_downgrade(self, runner: CliRunner, alpha, storage_root: Path) -> None:
        runner.invoke(main, ["create", "alpha"])
        result = runner.invoke(main, ["update", "alpha", "--version", "1.0.0"])
        assert result.exit_code == 0, result.output
        assert "version: 1.0.0" in result.output
        assert not (storage_root / "alpha-1.5.0").exists()

    def test_already_current(self, runner: CliRunner, alpha) -> None:
        runner.invoke(main, ["create", "alpha"])
        result = runner.invoke(main, ["update", "alpha", "--version", "1.5.0"])
        assert result.exit_code == 1
        assert "[ALREADY_AT_VERSION]" in result.output


class TestQueryCommands:
    def test_versions_marks(self, runner: CliRunner, alpha) -> None:
        runner.invoke(main, ["create", "alpha", "--version", "1.0.0"])
        result = runner.invoke(main, ["versions", "alpha"])
        assert result.exit_code == 0, result.output
        assert "1.5.0  <- latest" in result.output
        assert "1.0.0  <- 已安装" in result.output

    def test_versions_latest_only(self, runner: CliRunner, alpha) -> None:
        result = runner.invoke(main, ["versions", "alpha", "--latest"])
        assert result.output.strip() == "1.5.0"

    def test_files(self, runner: CliRunner, alpha) -> None:
        result = runner.invoke(main, ["files", "alpha", "--version", "1.0.0"])
        assert result.exit_code == 0, result.output
        assert "base: https://cdn.test/npm/alpha@1.0.0/" in result.output
        assert "shape: flat" in result.output
        assert "alpha.min.css" in result.output

    def test_installed_empty_then_listed(self, runner: CliRunner, alpha) -> None:
        assert "没有已安装的依赖" in runner.invoke(main, ["installed"]).output
        runner.invoke(main, ["create", "alpha"])
        result = runner.invoke(main, ["installed"])
        assert "alpha" in result.output
        assert "1.5.0" in result.output
        assert "[local" in result.output


class TestRemoveAndCustom:
    def test_remove(self, runner: CliRunner, alpha) -> None:
        runner.invoke(main, ["create", "alpha"])
        result = runner.invoke(main, ["remove", "alpha"])
        assert result.exit_code == 0
        assert "已删除: alpha" in result.output
        assert runner.invoke(main, ["remove", "alpha"]).exit_code == 1

    def test_custom(self, runner: CliRunner, tmp_path: Path, storage_root: Path) -> None:
        (tmp_path / "site.js").write_text("1", encoding="utf-8")
        result = runner.invoke(main, ["custom", "site", "1.0.0", "--script", str(tmp_path / "site.js")])
        assert result.exit_code == 0, result.output
        assert "- js/site.js" in result.output
        assert (storage_root / "site-1.0.0" / "js" / "site.js").exists()
