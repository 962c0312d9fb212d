"""Tests for the command-line entry point."""

import json
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from library_bundle.main import ApplicationContext, main, parse_arguments, run_headless


def _write_config(tmp_path: Path, library: object) -> Path:
    library_path = tmp_path / "library.json"
    library_path.write_text(json.dumps(library), encoding="utf-8")
    image_dir = tmp_path / "config" / "library" / "files" / "g1"
    image_dir.mkdir(parents=True)
    (image_dir / "cover.png").write_bytes(b"png")

    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "library_path": str(library_path),
        "configuration_path": str(tmp_path / "config"),
        "application_path": str(tmp_path / "app"),
        "archive_format": "zip",
    }), encoding="utf-8")
    return config_path


class TestParseArguments:
    def test_defaults(self) -> None:
        args = parse_arguments([])

        assert args.config is None
        assert args.log_level is None
        assert args.log_dir is None
        assert not args.no_tui

    def test_all_options(self) -> None:
        args = parse_arguments(["--config", "c.json", "--log-level", "DEBUG", "--log-dir", "logs", "--no-tui"])

        assert args.config == Path("c.json")
        assert args.log_level == "DEBUG"
        assert args.log_dir == Path("logs")
        assert args.no_tui

    def test_invalid_log_level_rejected(self) -> None:
        with pytest.raises(SystemExit):
            parse_arguments(["--log-level", "LOUD"])


class TestHeadless:
    def test_successful_export(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config_path = _write_config(tmp_path, {
            "games": [{"id": "g1", "name": "Half-Life", "cover_image": "g1/cover.png"}],
        })

        exit_code = run_headless(ApplicationContext(config_path=config_path))

        assert exit_code == 0
        assert "Library exported successfully" in capsys.readouterr().out
        with zipfile.ZipFile(tmp_path / "app" / "LibraryExport.zip") as zf:
            assert sorted(zf.namelist()) == ["images/g1/cover.png", "library.json"]

    def test_unreadable_library_fails(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config_path = _write_config(tmp_path, ["not", "a", "library"])

        exit_code = run_headless(ApplicationContext(config_path=config_path))

        assert exit_code == 1
        assert "Export failed:" in capsys.readouterr().err
        assert not (tmp_path / "app" / "LibraryExport.zip").exists()

    def test_main_exits_with_code(self, tmp_path: Path) -> None:
        config_path = _write_config(tmp_path, {"games": []})

        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(config_path), "--no-tui", "--log-dir", str(tmp_path / "logs")])

        assert exc_info.value.code == 0
        assert (tmp_path / "app" / "LibraryExport.zip").exists()

    def test_failed_run_reports_error_categories_on_exit(self, tmp_path: Path) -> None:
        config_path = _write_config(tmp_path, ["not", "a", "library"])

        with patch("library_bundle.main.log") as mock_log:
            with pytest.raises(SystemExit) as exc_info:
                main(["--config", str(config_path), "--no-tui", "--log-dir", str(tmp_path / "logs")])

        assert exc_info.value.code == 1
        exit_call = mock_log.info.call_args_list[-1]
        assert exit_call.args == ("Application exiting",)
        assert exit_call.kwargs["errors_by_category"].get("source", 0) >= 1
