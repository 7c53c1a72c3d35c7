"""Basic unit tests for settings, logging and the command line."""

import logging
from pathlib import Path

import pytest

from conftest import GREEN, RED, sheet, tile_config


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "settings.ini"


class TestSettingsInitialization:
    """Test settings initialization and basic operations."""

    def test_app_settings_init(self, settings_file: Path) -> None:
        """Test AppSettings can be initialized with defaults."""
        from cdda_tileset_diff.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        assert settings_obj.console_log_level == "INFO"
        assert settings_obj.console_use_colors is True
        assert settings_obj.file_logging is False
        assert settings_obj.dump_sprites is True
        assert settings_obj.extract_dir_name == "extracted"

    def test_values_persist(self, settings_file: Path) -> None:
        """Test values written by one instance are read by another."""
        from cdda_tileset_diff.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.console_log_level = "debug"
        settings_obj.dump_sprites = False
        settings_obj.sync()

        reloaded = AppSettings(settings_file=settings_file)
        assert reloaded.console_log_level == "DEBUG"
        assert reloaded.dump_sprites is False

    def test_invalid_level_is_ignored(self, settings_file: Path) -> None:
        """Test invalid console level keeps the previous one."""
        from cdda_tileset_diff.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.console_log_level = "LOUD"
        assert settings_obj.console_log_level == "INFO"

    def test_app_settings_validation(self, settings_file: Path) -> None:
        """Test settings validation returns result."""
        from cdda_tileset_diff.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        validation = settings_obj.validate()
        assert validation.is_valid
        assert validation.errors == []

        settings_obj.dump_sprites = False
        assert settings_obj.validate().warnings

    def test_extract_dir_name(self, settings_file: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test extract dir name accepts plain names and rejects paths."""
        from cdda_tileset_diff.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.extract_dir_name = "out"
        assert settings_obj.extract_dir_name == "out"

        with caplog.at_level(logging.WARNING):
            settings_obj.extract_dir_name = "a/b"
        assert settings_obj.extract_dir_name == "out"
        assert "Invalid extract dir name" in caplog.text

    def test_get_settings_file_path(self, settings_file: Path) -> None:
        """Test the INI file backs the settings."""
        from cdda_tileset_diff.settings import AppSettings

        settings_obj = AppSettings(settings_file=settings_file)
        assert Path(settings_obj.get_settings_file_path()).resolve() == settings_file.resolve()


class TestUtilsLogging:
    """Test logging configuration."""

    def test_logging_setup_with_settings(self, settings_file: Path, restore_logging) -> None:
        """Test logging setup installs a console handler."""
        from cdda_tileset_diff.settings import AppSettings
        from cdda_tileset_diff.utils.logging_config import setup_logging

        settings_obj = AppSettings(settings_file=settings_file)
        setup_logging(settings=settings_obj, level_override="warning")

        logger = logging.getLogger("cdda_tileset_diff")
        assert logger.level == logging.DEBUG
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].level == logging.WARNING

    def test_plain_console_without_colors(self, settings_file: Path, restore_logging) -> None:
        """Test disabling colors installs a plain formatter."""
        from cdda_tileset_diff.settings import AppSettings
        from cdda_tileset_diff.utils.logging_config import ColoredFormatter, setup_logging

        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.console_use_colors = False
        assert settings_obj.console_use_colors is False
        setup_logging(settings=settings_obj)

        handlers = logging.getLogger().handlers
        assert not isinstance(handlers[0].formatter, ColoredFormatter)

    def test_file_logging_writes_csv(
        self, settings_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, restore_logging
    ) -> None:
        """Test enabling file logging adds a CSV file handler."""
        from cdda_tileset_diff.settings import AppSettings
        from cdda_tileset_diff.utils.logging_config import CSVFormatter, setup_logging

        monkeypatch.chdir(tmp_path)
        settings_obj = AppSettings(settings_file=settings_file)
        settings_obj.file_logging = True
        assert settings_obj.file_logging is True
        setup_logging(settings=settings_obj)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 2
        assert isinstance(handlers[1].formatter, CSVFormatter)
        assert (tmp_path / settings_obj.log_file_path).exists()

    def test_colored_formatter(self) -> None:
        """Test the level name is wrapped in color codes."""
        from cdda_tileset_diff.utils.logging_config import ColoredFormatter

        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
        formatted = ColoredFormatter(fmt="%(levelname)s %(message)s").format(record)
        assert formatted == "\033[33mWARNING\033[0m careful"

    def test_csv_formatter_escapes_quotes(self) -> None:
        """Test CSV output doubles quotes in messages."""
        from cdda_tileset_diff.utils.logging_config import CSVFormatter

        record = logging.LogRecord("x", logging.INFO, __file__, 7, 'say "hi"', None, None)
        assert CSVFormatter().format(record).endswith('"7";"say ""hi"""')


class TestCommandLine:
    """Test the compare and extract subcommands."""

    def _tilesets(self, make_tileset) -> tuple[Path, Path]:
        ts_a = make_tileset(
            "a",
            {"tiles.png": ([RED, GREEN], 2)},
            tile_config([sheet("tiles.png", [{"id": "p", "fg": 0}, {"id": "q", "fg": 1}])]),
        )
        ts_b = make_tileset(
            "b",
            {"tiles.png": ([RED, GREEN], 2)},
            tile_config([sheet("tiles.png", [{"id": "q", "fg": 0}])]),
        )
        return ts_a, ts_b

    def test_compare(self, make_tileset, settings_file: Path, restore_logging, capsys) -> None:
        from cdda_tileset_diff.__main__ import main

        ts_a, ts_b = self._tilesets(make_tileset)
        code = main(["--settings-file", str(settings_file), "compare", str(ts_a), str(ts_b)])

        assert code == 0
        out = capsys.readouterr().out
        assert "Running comparison..." in out
        assert out.rstrip().endswith("Done!")
        assert (ts_a / "exclusives.txt").read_text() == "p"
        assert (ts_a / "different.txt").read_text() == "q"
        assert (ts_a / "sprites" / "1.png").exists()

    def test_compare_without_sprite_dump(
        self, make_tileset, settings_file: Path, restore_logging
    ) -> None:
        from cdda_tileset_diff.__main__ import main

        ts_a, ts_b = self._tilesets(make_tileset)
        args = ["--settings-file", str(settings_file), "--no-sprite-dump", "compare", str(ts_a), str(ts_b)]
        assert main(args) == 0
        assert list((ts_a / "sprites").iterdir()) == []

    def test_extract(self, make_tileset, settings_file: Path, restore_logging) -> None:
        from cdda_tileset_diff.__main__ import main

        ts_a, _ = self._tilesets(make_tileset)
        ids_file = ts_a.parent / "ids.txt"
        ids_file.write_text("q\nmissing\n", encoding="utf-8")

        code = main(["--settings-file", str(settings_file), "extract", str(ts_a), str(ids_file)])

        assert code == 0
        assert (ts_a / "extracted" / "q" / "q.json").exists()
        assert len(list((ts_a / "extracted").glob("*.png"))) == 1

    def test_extract_into_configured_dir(
        self, make_tileset, settings_file: Path, restore_logging
    ) -> None:
        from cdda_tileset_diff.__main__ import main
        from cdda_tileset_diff.settings import AppSettings

        AppSettings(settings_file=settings_file).extract_dir_name = "out"
        ts_a, _ = self._tilesets(make_tileset)
        ids_file = ts_a.parent / "ids.txt"
        ids_file.write_text("q\n", encoding="utf-8")

        assert main(["--settings-file", str(settings_file), "extract", str(ts_a), str(ids_file)]) == 0
        assert (ts_a / "out" / "q" / "q.json").exists()
        assert not (ts_a / "extracted").exists()

    def test_failed_load_aborts(self, tmp_path: Path, settings_file: Path, restore_logging, capsys) -> None:
        from cdda_tileset_diff.__main__ import main

        code = main(
            ["--settings-file", str(settings_file), "compare", str(tmp_path / "x"), str(tmp_path / "y")]
        )

        assert code == 1
        assert "Aborted." in capsys.readouterr().out
