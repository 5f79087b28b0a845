import pytest

from gmusic_cli import __main__ as entry_point


def test_unexpected_error_prints_panel_and_exits_1(monkeypatch, capsys):
    def broken_app():
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(entry_point, "app", broken_app)

    with pytest.raises(SystemExit) as exc_info:
        entry_point.main()

    assert exc_info.value.code == 1
    output = capsys.readouterr().out
    assert "RuntimeError" in output
    assert "disk on fire" in output


def test_clean_exit_is_passed_through(monkeypatch):
    def finished_app():
        raise SystemExit(0)

    monkeypatch.setattr(entry_point, "app", finished_app)

    with pytest.raises(SystemExit) as exc_info:
        entry_point.main()

    assert exc_info.value.code == 0
