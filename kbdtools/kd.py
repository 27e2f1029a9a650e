"""Linux console ioctl numbers, keyboard modes and console helpers."""

import errno
import fcntl
import os
import struct
from dataclasses import dataclass
from enum import IntEnum, IntFlag

# Font ioctls.
GIO_FONT = 0x4B60
PIO_FONT = 0x4B61
GIO_FONTX = 0x4B6B
PIO_FONTX = 0x4B6C
PIO_FONTRESET = 0x4B6D
KDFONTOP = 0x4B72
KDKBDREP = 0x4B52

# Keyboard and display ioctls.
KDGKBTYPE = 0x4B33
KDSETMODE = 0x4B3A
KDGKBMODE = 0x4B44
KDSKBMODE = 0x4B45
KDSIGACCEPT = 0x4B4E

# Keyboard table limits.
NR_KEYS = 256
MAX_NR_KEYMAPS = 256
NAME_MAX = 255


class KeyboardMode(IntEnum):
    """Keyboard translation modes of a virtual console."""

    RAW = 0
    XLATE = 1
    MEDIUMRAW = 2
    UNICODE = 3
    OFF = 4


class DisplayMode(IntEnum):
    """Display modes of a virtual console."""

    TEXT = 0
    GRAPHICS = 1


class FontOp(IntEnum):
    """Operations of the KDFONTOP ioctl."""

    SET = 0
    GET = 1
    SET_DEFAULT = 2
    COPY = 3
    SET_TALL = 4
    GET_TALL = 5


class FontFlag(IntFlag):
    """Flags of the KDFONTOP ioctl."""

    DONT_RECALC = 1
    OLD = 0x80000000


_FONT_OP_FORMAT = "@5IP"


@dataclass
class ConsoleFontOp:
    """The argument block of the KDFONTOP ioctl."""

    op: int
    flags: int = 0
    width: int = 0
    height: int = 0
    charcount: int = 0
    data_address: int = 0

    def pack(self) -> bytes:
        """Return the native in-memory layout of this block."""
        return struct.pack(
            _FONT_OP_FORMAT,
            int(self.op),
            int(self.flags),
            self.width,
            self.height,
            self.charcount,
            self.data_address,
        )

    @classmethod
    def unpack(cls, data: bytes) -> "ConsoleFontOp":
        """Build a block from its native in-memory layout."""
        op, flags, width, height, charcount, address = struct.unpack(
            _FONT_OP_FORMAT, data
        )
        return cls(op, flags, width, height, charcount, address)


_MODE_NAMES = {
    KeyboardMode.RAW: "RAW",
    KeyboardMode.XLATE: "XLATE",
    KeyboardMode.MEDIUMRAW: "MEDIUMRAW",
    KeyboardMode.UNICODE: "UNICODE",
}


def mode_name(mode: int) -> str:
    """Return the display name of a keyboard mode."""
    return _MODE_NAMES.get(mode, "?UNKNOWN?")


def get_keyboard_mode(fd: int):
    """Read the keyboard mode of the console behind ``fd``."""
    result = fcntl.ioctl(fd, KDGKBMODE, struct.pack("i", 0))
    (value,) = struct.unpack("i", result)
    try:
        return KeyboardMode(value)
    except ValueError:
        return value


def set_keyboard_mode(fd: int, mode: int) -> None:
    """Set the keyboard mode of the console behind ``fd``."""
    fcntl.ioctl(fd, KDSKBMODE, int(mode))


def set_display_mode(fd: int, mode: int) -> None:
    """Switch the console behind ``fd`` to text or graphics mode."""
    fcntl.ioctl(fd, KDSETMODE, int(mode))


_CONSOLE_CANDIDATES = (
    "/proc/self/fd/0",
    "/dev/tty",
    "/dev/tty0",
    "/dev/vc/0",
    "/dev/systty",
    "/dev/console",
)


def _is_console(fd: int) -> bool:
    try:
        fcntl.ioctl(fd, KDGKBTYPE, b"\0")
    except OSError:
        return False
    return True


def _open_any_mode(path: str) -> int:
    for flags in (os.O_RDWR, os.O_WRONLY, os.O_RDONLY):
        try:
            return os.open(path, flags | os.O_NOCTTY)
        except PermissionError:
            continue
    raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), path)


def open_console(path=None) -> int:
    """Open a file descriptor that refers to a Linux console.

    With ``path`` only that device is tried; otherwise the usual console
    devices and then the standard streams are examined.
    """
    if path is not None:
        fd = _open_any_mode(path)
        if _is_console(fd):
            return fd
        os.close(fd)
        raise OSError(errno.ENOTTY, f"{path} is not a console")

    for candidate in _CONSOLE_CANDIDATES:
        try:
            fd = _open_any_mode(candidate)
        except OSError:
            continue
        if _is_console(fd):
            return fd
        os.close(fd)

    for fd in (0, 1, 2):
        if _is_console(fd):
            return os.dup(fd)

    raise OSError(
        errno.ENOTTY, "Couldn't get a file descriptor referring to the console."
    )