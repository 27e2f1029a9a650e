import errno
import os

import pytest

from kbdtools.kd import (
    ConsoleFontOp,
    DisplayMode,
    FontFlag,
    FontOp,
    KeyboardMode,
    get_keyboard_mode,
    mode_name,
    open_console,
    set_display_mode,
    set_keyboard_mode,
)


@pytest.fixture
def regular_fd(tmp_path):
    path = tmp_path / "plain"
    path.write_bytes(b"")
    fd = os.open(path, os.O_RDWR)
    yield fd
    os.close(fd)


@pytest.mark.parametrize(
    "mode,name",
    [
        (KeyboardMode.RAW, "RAW"),
        (KeyboardMode.XLATE, "XLATE"),
        (KeyboardMode.MEDIUMRAW, "MEDIUMRAW"),
        (KeyboardMode.UNICODE, "UNICODE"),
    ],
)
def test_mode_name_known(mode, name):
    assert mode_name(mode) == name


@pytest.mark.parametrize("mode", [KeyboardMode.OFF, 42])
def test_mode_name_unknown(mode):
    assert mode_name(mode) == "?UNKNOWN?"


def test_font_op_round_trip():
    block = ConsoleFontOp(
        op=FontOp.GET_TALL,
        flags=FontFlag.OLD | FontFlag.DONT_RECALC,
        width=8,
        height=16,
        charcount=512,
        data_address=4096,
    )
    restored = ConsoleFontOp.unpack(block.pack())
    assert restored == block


def test_font_op_defaults_pack_zeroes():
    packed = ConsoleFontOp(op=FontOp.SET).pack()
    assert set(packed) == {0}


def test_get_keyboard_mode_on_regular_file(regular_fd):
    with pytest.raises(OSError):
        get_keyboard_mode(regular_fd)


def test_set_keyboard_mode_on_regular_file(regular_fd):
    with pytest.raises(OSError):
        set_keyboard_mode(regular_fd, KeyboardMode.XLATE)


def test_set_display_mode_on_regular_file(regular_fd):
    with pytest.raises(OSError):
        set_display_mode(regular_fd, DisplayMode.TEXT)


def test_open_console_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_console(str(tmp_path / "missing"))


def test_open_console_regular_file(tmp_path):
    path = tmp_path / "plain"
    path.write_bytes(b"")
    with pytest.raises(OSError) as info:
        open_console(str(path))
    assert info.value.errno == errno.ENOTTY