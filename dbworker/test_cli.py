"""
Tests for the command line interface.

Run with: pytest dbworker/test_cli.py
"""

from .cli import main


def test_init_and_stats(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'cli.db'}"

    assert main(["--profile", url, "init"]) == 0
    assert main(["--profile", url, "stats"]) == 0

    out = capsys.readouterr().out
    assert "Database initialized" in out
    assert "Persons: 0" in out


def test_import_localities(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    path = tmp_path / "localities.txt"
    path.write_text("1700\tFribourg\tFR\n", encoding="utf-8")

    main(["--profile", url, "init"])
    assert main(["--profile", url, "import-localities", str(path)]) == 0
    assert "Imported 1 localities" in capsys.readouterr().out


def test_default_profile_uses_db_path(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("DBWORKER_DB_PATH", str(tmp_path / "default.db"))

    assert main(["init"]) == 0
    assert main(["persons"]) == 0
    assert (tmp_path / "default.db").exists()


def test_errors_are_reported(tmp_path, capsys):
    assert main(["--profile", "no-such-profile", "stats"]) == 2
    assert "Error:" in capsys.readouterr().err


def test_no_command_prints_help(capsys):
    assert main([]) == 1
