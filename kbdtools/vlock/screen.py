"""Save and restore the contents of a virtual console screen."""

import os
import stat
from dataclasses import dataclass
from typing import Optional

_CLEAR = b"\x1b[3J\x1b[H\x1b[J"
_VC_MAJOR = 4


@dataclass
class SavedScreen:
    """Screen contents read from a ``/dev/vcsaN`` device kept open."""

    vcs: int
    columns: int
    lines: int
    contents: bytes

    def restore(self) -> None:
        """Write the saved contents back and close the device."""
        try:
            if os.lseek(self.vcs, 0, os.SEEK_SET) != 0:
                return
            os.write(self.vcs, bytes([self.columns]))
            os.write(self.vcs, bytes([self.lines]))
            os.write(self.vcs, self.contents)
        except OSError:
            pass
        finally:
            os.close(self.vcs)


def vcsa_path_for(rdev: int) -> Optional[str]:
    """Return the screen device for a virtual console device number."""
    if (rdev >> 8) != _VC_MAJOR:
        return None
    return f"/dev/vcsa{rdev & 0xFF}"


def _capture(vcs: int) -> Optional[SavedScreen]:
    """Read the screen from an open device; close it on failure."""
    try:
        header = os.read(vcs, 1) + os.read(vcs, 1)
        if len(header) == 2:
            columns, lines = header
            size = 2 * lines * columns + 2
            contents = os.read(vcs, size)
            if len(contents) == size:
                return SavedScreen(vcs, columns, lines, contents)
    except OSError:
        pass
    os.close(vcs)
    return None


def _open_screen(stdin_fd: int) -> Optional[int]:
    try:
        st = os.fstat(stdin_fd)
    except OSError:
        return None
    if not stat.S_ISCHR(st.st_mode):
        return None
    path = vcsa_path_for(st.st_rdev)
    if path is None:
        return None
    try:
        return os.open(path, os.O_RDWR)
    except OSError:
        return None


def save_screen(stdin_fd: int = 0, stdout_fd: int = 1) -> Optional[SavedScreen]:
    """Save the console screen behind ``stdin_fd`` and clear ``stdout_fd``.

    Returns ``None`` when the screen cannot be read; the clear sequence
    is written in either case.
    """
    vcs = _open_screen(stdin_fd)
    saved = _capture(vcs) if vcs is not None else None
    try:
        os.write(stdout_fd, _CLEAR)
    except OSError:
        pass
    return saved