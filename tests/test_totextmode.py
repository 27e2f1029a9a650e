import pytest

from kbdtools.totextmode import main


def test_no_arguments_is_usage_error(capsys):
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 1
    assert "Usage: totextmode" in capsys.readouterr().err


def test_too_many_arguments_is_usage_error(capsys):
    with pytest.raises(SystemExit) as info:
        main(["a", "b"])
    assert info.value.code == 1
    assert "Usage: totextmode" in capsys.readouterr().err


def test_version(capsys):
    assert main(["-V"]) == 0
    assert "totextmode" in capsys.readouterr().out