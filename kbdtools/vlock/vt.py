"""Take control of virtual console switching while the console is locked."""

import errno
import fcntl
import os
import signal
import struct
import sys
from typing import Optional

from kbdtools.vlock.screen import SavedScreen, save_screen

VT_GETMODE = 0x5601
VT_SETMODE = 0x5602
VT_RELDISP = 0x5605
VT_PROCESS = 0x01
VT_ACKACQ = 0x02

# struct vt_mode: char mode, waitv; short relsig, acqsig, frsig
_VT_MODE = struct.Struct("@bbhhh")

_IGNORED_SIGNALS = (
    "SIGHUP", "SIGINT", "SIGQUIT", "SIGPIPE", "SIGALRM", "SIGTERM",
    "SIGTSTP", "SIGTTIN", "SIGTTOU", "SIGURG", "SIGVTALRM", "SIGIO",
    "SIGPWR",
)


class VtLock:
    """Lock of one virtual console, or of all of them with ``lock_all``.

    Use as a context manager, or call :meth:`acquire` and :meth:`restore`.
    """

    device = "/dev/tty"

    def __init__(self, tty: str, lock_all: bool = False, stderr=None):
        self.tty = tty
        self.lock_all = lock_all
        self.stderr = stderr if stderr is not None else sys.stderr
        self.is_vt = False
        self._fd: Optional[int] = None
        self._saved_mode: Optional[bytes] = None
        self._screen: Optional[SavedScreen] = None
        self._old_handlers: dict = {}
        self._old_mask = None

    def _warn(self, message: str) -> None:
        print(f"vlock: {message}", file=self.stderr)

    def _close(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def _release_vt(self, signum, frame) -> None:
        # The kernel is refused the switch; errors are ignored.
        if self._fd is not None:
            try:
                fcntl.ioctl(self._fd, VT_RELDISP, 0)
            except OSError:
                pass

    def _acquire_vt(self, signum, frame) -> None:
        if self._fd is not None:
            try:
                fcntl.ioctl(self._fd, VT_RELDISP, VT_ACKACQ)
            except OSError:
                pass

    def _set_handler(self, signum: int, handler) -> None:
        try:
            previous = signal.signal(signum, handler)
        except (OSError, ValueError):
            return
        self._old_handlers.setdefault(signum, previous)

    def _mask_signals(self) -> None:
        self._old_mask = signal.pthread_sigmask(signal.SIG_BLOCK, [])
        if self.lock_all:
            self._set_handler(signal.SIGUSR1, self._release_vt)
            self._set_handler(signal.SIGUSR2, self._acquire_vt)
            signal.pthread_sigmask(
                signal.SIG_UNBLOCK, {signal.SIGUSR1, signal.SIGUSR2}
            )
        else:
            self._set_handler(signal.SIGUSR1, signal.SIG_IGN)
            self._set_handler(signal.SIGUSR2, signal.SIG_IGN)
        for name in _IGNORED_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is not None:
                self._set_handler(signum, signal.SIG_IGN)
        signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGCHLD})

    def _unmask_signals(self) -> None:
        for signum, handler in self._old_handlers.items():
            try:
                signal.signal(signum, handler)
            except (OSError, ValueError, TypeError):
                continue
        self._old_handlers = {}
        if self._old_mask is not None:
            signal.pthread_sigmask(signal.SIG_SETMASK, self._old_mask)
            self._old_mask = None

    def acquire(self) -> None:
        """Set up the lock; raises ``OSError`` when it cannot be taken."""
        try:
            self._fd = os.open(self.device, os.O_RDWR)
        except OSError as exc:
            self._warn(f"could not open {self.device}: {exc.strerror}")
            raise

        buf = bytearray(_VT_MODE.size)
        try:
            fcntl.ioctl(self._fd, VT_GETMODE, buf, True)
        except OSError:
            self.is_vt = False
            print(f"This tty ({self.tty}) is not a virtual console.", file=self.stderr)
            if self.lock_all:
                self.lock_all = False
                self._close()
                message = "The entire console display cannot be locked."
                print(message, file=self.stderr)
                raise OSError(errno.ENOTTY, message) from None
            print("\n", file=self.stderr)
            self.stderr.flush()
        else:
            self.is_vt = True
            self._saved_mode = bytes(buf)

        if not self.lock_all:
            self._close()

        self._mask_signals()

        if self.lock_all:
            _mode, waitv, _rel, _acq, frsig = _VT_MODE.unpack(self._saved_mode)
            wanted = _VT_MODE.pack(
                VT_PROCESS, waitv, signal.SIGUSR1, signal.SIGUSR2, frsig
            )
            try:
                fcntl.ioctl(self._fd, VT_SETMODE, wanted)
            except OSError as exc:
                self._warn(f"ioctl VT_SETMODE: {exc.strerror}")
                self._unmask_signals()
                self._close()
                raise

        if self.is_vt:
            self._screen = save_screen(0, 1)

    def restore(self) -> None:
        """Give back the screen and console switching."""
        if self.is_vt:
            if self._screen is not None:
                self._screen.restore()
                self._screen = None
            if self.lock_all and self._fd is not None and self._saved_mode:
                try:
                    fcntl.ioctl(self._fd, VT_SETMODE, self._saved_mode)
                except OSError:
                    pass
        self._unmask_signals()
        self._close()

    def __enter__(self) -> "VtLock":
        self.acquire()
        return self

    def __exit__(self, *args) -> None:
        self.restore()