import pytest

from kbdtools.showkey import (
    EX_USAGE,
    KeyEvent,
    ShowkeyOptions,
    decode_keycodes,
    format_ascii,
    format_key_event,
    format_scancodes,
    main,
    parse_args,
)


def test_decode_single_byte_press_and_release():
    assert list(decode_keycodes(b"\x1e\x9e")) == [
        KeyEvent(0x1E, False),
        KeyEvent(0x1E, True),
    ]


def test_decode_empty():
    assert list(decode_keycodes(b"")) == []


@pytest.mark.parametrize("keycode", [128, 200, 255, 1000, 16383])
@pytest.mark.parametrize("released", [False, True])
def test_decode_three_byte_report(keycode, released):
    first = 0x80 if released else 0x00
    report = bytes([first, 0x80 | (keycode >> 7), 0x80 | (keycode & 0x7F)])
    assert list(decode_keycodes(report)) == [KeyEvent(keycode, released)]


def test_decode_truncated_three_byte_report_falls_back():
    events = list(decode_keycodes(b"\x00\x81"))
    assert events == [KeyEvent(0, False), KeyEvent(1, True)]


def test_decode_mixed_stream_counts_events():
    stream = b"\x1e" + bytes([0x00, 0x81, 0x80]) + b"\x9e"
    events = list(decode_keycodes(stream))
    assert len(events) == 3
    assert events[0] == KeyEvent(0x1E, False)
    assert events[2] == KeyEvent(0x1E, True)


def test_format_key_event_press():
    assert format_key_event(KeyEvent(30, False)) == "keycode  30 press"


def test_format_key_event_release():
    assert format_key_event(KeyEvent(30, True)) == "keycode  30 release"


def test_format_scancodes():
    assert format_scancodes(b"\x1e\x9e") == "0x1e 0x9e "


def test_format_scancodes_empty():
    assert format_scancodes(b"") == ""


def test_format_ascii_control_d():
    assert format_ascii(4) == " \t  4 0004 0x04"


def test_parse_defaults():
    assert parse_args([]) == ShowkeyOptions(True, False, 10)


def test_parse_scancodes_then_keycodes():
    assert parse_args(["-s"]).show_keycodes is False
    assert parse_args(["-s", "-k"]).show_keycodes is True


def test_parse_ascii_long():
    assert parse_args(["--ascii"]).print_ascii is True


@pytest.mark.parametrize(
    "args,expected",
    [
        (["-t", "5"], 5),
        (["--timeout=7x"], 7),
        (["-t", "0"], 10),
        (["--timeout", "abc"], 10),
        (["-t", "-3"], 10),
    ],
)
def test_parse_timeout(args, expected):
    assert parse_args(args).timeout == expected


def test_parse_extra_argument_is_usage_error(capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(["extra"])
    assert info.value.code == EX_USAGE
    assert "Usage: showkey" in capsys.readouterr().err


def test_parse_unknown_option_is_usage_error():
    with pytest.raises(SystemExit) as info:
        parse_args(["-z"])
    assert info.value.code == EX_USAGE


def test_help_exits_successfully(capsys):
    with pytest.raises(SystemExit) as info:
        parse_args(["-h"])
    assert info.value.code == 0
    assert "--scancodes" in capsys.readouterr().err


def test_main_version(capsys):
    with pytest.raises(SystemExit) as info:
        main(["-V"])
    assert info.value.code == 0
    assert "showkey" in capsys.readouterr().out