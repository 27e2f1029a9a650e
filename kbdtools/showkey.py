"""Show the scancodes, keycodes or byte values produced by the keyboard."""

import getopt
import os
import re
import signal
import sys
import termios
from dataclasses import dataclass
from importlib import metadata
from typing import Iterator

from kbdtools.kd import (
    KeyboardMode,
    get_keyboard_mode,
    mode_name,
    open_console,
    set_keyboard_mode,
)

PROGRAM = "showkey"
EX_USAGE = 64
_BUFSIZE = 18  # divisible by 3
_DEFAULT_TIMEOUT = 10

_OPTION_HELP = (
    ("-a, --ascii", "display the decimal/octal/hex values of the keys."),
    ("-s, --scancodes", "display only the raw scan-codes."),
    ("-k, --keycodes", "display only the interpreted keycodes (default)."),
    ("-t, --timeout", "set timeout, default 10"),
    ("-h, --help", "print this usage message."),
    ("-V, --version", "print version number."),
)

_FATAL_SIGNALS = (
    "SIGHUP", "SIGINT", "SIGQUIT", "SIGILL", "SIGTRAP", "SIGABRT", "SIGIOT",
    "SIGFPE", "SIGUSR1", "SIGSEGV", "SIGUSR2", "SIGPIPE", "SIGTERM",
    "SIGSTKFLT", "SIGCHLD", "SIGCONT", "SIGTSTP", "SIGTTIN", "SIGTTOU",
)


@dataclass(frozen=True)
class KeyEvent:
    """A key press or release reported in medium-raw mode."""

    keycode: int
    released: bool


@dataclass
class ShowkeyOptions:
    """Command line settings."""

    show_keycodes: bool = True
    print_ascii: bool = False
    timeout: int = _DEFAULT_TIMEOUT


def decode_keycodes(data: bytes) -> Iterator[KeyEvent]:
    """Yield key events from medium-raw bytes, including 3-byte reports."""
    pos = 0
    end = len(data)
    while pos < end:
        first = data[pos]
        if (
            pos + 2 < end
            and first & 0x7F == 0
            and data[pos + 1] & 0x80
            and data[pos + 2] & 0x80
        ):
            keycode = ((data[pos + 1] & 0x7F) << 7) | (data[pos + 2] & 0x7F)
            pos += 3
        else:
            keycode = first & 0x7F
            pos += 1
        yield KeyEvent(keycode, bool(first & 0x80))


def format_key_event(event: KeyEvent) -> str:
    """Format a key event as one output line."""
    action = "release" if event.released else "press"
    return f"keycode {event.keycode:3d} {action}"


def format_scancodes(data: bytes) -> str:
    """Format raw scancodes as hexadecimal values."""
    return "".join(f"0x{byte:02x} " for byte in data)


def format_ascii(byte: int) -> str:
    """Format one input byte in decimal, octal and hexadecimal."""
    return f" \t{byte:3d} 0{byte:03o} 0x{byte:02x}"


def _version() -> str:
    try:
        return metadata.version("kbdtools")
    except metadata.PackageNotFoundError:
        return "unknown"


def _usage(code: int) -> None:
    lines = [f"Usage: {PROGRAM} [option...]", "", "Options:"]
    lines += [f"  {flag:<20} {text}" for flag, text in _OPTION_HELP]
    print("\n".join(lines), file=sys.stderr)
    raise SystemExit(code)


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def parse_args(argv) -> ShowkeyOptions:
    """Parse command line arguments; exits on help, version or misuse."""
    try:
        pairs, rest = getopt.gnu_getopt(
            list(argv),
            "haskVt:",
            ["help", "ascii", "scancodes", "keycodes", "timeout=", "version"],
        )
    except getopt.GetoptError as exc:
        print(f"{PROGRAM}: {exc}", file=sys.stderr)
        _usage(EX_USAGE)

    options = ShowkeyOptions()
    for flag, value in pairs:
        if flag in ("-s", "--scancodes"):
            options.show_keycodes = False
        elif flag in ("-k", "--keycodes"):
            options.show_keycodes = True
        elif flag in ("-a", "--ascii"):
            options.print_ascii = True
        elif flag in ("-V", "--version"):
            print(f"{PROGRAM} from kbdtools {_version()}")
            raise SystemExit(0)
        elif flag in ("-h", "--help"):
            _usage(0)
        elif flag in ("-t", "--timeout"):
            timeout = _atoi(value)
            options.timeout = timeout if timeout >= 1 else _DEFAULT_TIMEOUT

    if rest:
        _usage(EX_USAGE)
    return options


def _warn(what: str, exc: Exception) -> None:
    detail = exc.args[-1] if exc.args else exc
    print(f"{PROGRAM}: {what}: {detail}", file=sys.stderr)


def _fail(message: str, exc=None, code: int = 1) -> None:
    if exc is not None:
        _warn(message, exc)
    else:
        print(f"{PROGRAM}: {message}", file=sys.stderr)
    raise SystemExit(code)


def _tcgetattr(fd: int):
    try:
        return termios.tcgetattr(fd)
    except termios.error as exc:
        _warn("tcgetattr", exc)
        return None


def _tcsetattr(fd: int, when: int, attrs) -> None:
    if attrs is None:
        return
    try:
        termios.tcsetattr(fd, when, attrs)
    except termios.error as exc:
        _warn("tcsetattr", exc)


def _with_input_settings(attrs, clear_lflag, set_lflag, vmin, vtime):
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    cc = list(cc)
    cc[termios.VMIN] = vmin
    cc[termios.VTIME] = vtime
    lflag = (lflag & ~clear_lflag) | set_lflag
    return [0, oflag, cflag, lflag, ispeed, ospeed, cc]


def _show_ascii(fd: int) -> int:
    old = _tcgetattr(fd)
    new = _tcgetattr(fd)
    if new is not None:
        new = _with_input_settings(
            new,
            termios.ICANON | termios.ISIG,
            termios.ECHO | termios.ECHOCTL,
            1,
            0,
        )
        _tcsetattr(fd, termios.TCSAFLUSH, new)
    print("\nPress any keys - Ctrl-D will terminate this program\n", flush=True)
    try:
        while True:
            try:
                data = os.read(fd, 1)
            except OSError:
                break
            if len(data) == 1:
                print(format_ascii(data[0]), flush=True)
            if len(data) != 1 or data[0] == 0o4:
                break
    finally:
        _tcsetattr(fd, termios.TCSANOW, old)
    return 0


class _CaughtSignal(Exception):
    def __init__(self, signum: int):
        super().__init__(signum)
        self.signum = signum

    @property
    def is_timeout(self) -> bool:
        return self.signum == signal.SIGALRM


def _on_signal(signum, frame):
    raise _CaughtSignal(signum)


def _install_handlers() -> dict:
    previous = {}
    for name in ("SIGALRM",) + _FATAL_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is None or signum in previous:
            continue
        try:
            previous[signum] = signal.signal(signum, _on_signal)
        except (OSError, ValueError):
            continue
    return previous


def _restore_handlers(previous: dict) -> None:
    for signum, handler in previous.items():
        try:
            signal.signal(signum, handler)
        except (OSError, ValueError, TypeError):
            continue


def _report_mode(fd: int):
    try:
        old_mode = get_keyboard_mode(fd)
    except OSError as exc:
        _fail("Unable to read keyboard mode", exc)
    print(f"kb mode was {mode_name(old_mode)}")
    if old_mode != KeyboardMode.XLATE:
        print(
            "[ if you are trying this under X, it might not work\n"
            "since the X server is also reading /dev/console ]"
        )
    print()
    return old_mode


def _read_loop(fd: int, options: ShowkeyOptions) -> None:
    while True:
        signal.alarm(options.timeout)
        data = os.read(fd, _BUFSIZE)
        if options.show_keycodes:
            for event in decode_keycodes(data):
                print(format_key_event(event))
        else:
            print(format_scancodes(data))
        sys.stdout.flush()


def _clean_up(fd: int, old_mode, old_attrs) -> None:
    try:
        try:
            set_keyboard_mode(fd, old_mode)
        except OSError as exc:
            _fail("ioctl KDSKBMODE", exc)
        _tcsetattr(fd, termios.TCSANOW, old_attrs)
    finally:
        os.close(fd)


def _show_console(options: ShowkeyOptions) -> int:
    try:
        fd = open_console(None)
    except OSError:
        _fail("Couldn't get a file descriptor referring to the console.")

    old_mode = _report_mode(fd)
    old_attrs = _tcgetattr(fd)
    new_attrs = _tcgetattr(fd)

    previous = _install_handlers()
    status = 0
    try:
        if new_attrs is not None:
            new_attrs = _with_input_settings(
                new_attrs,
                termios.ICANON | termios.ECHO | termios.ISIG,
                0,
                _BUFSIZE,
                1,
            )
            _tcsetattr(fd, termios.TCSAFLUSH, new_attrs)
        wanted = KeyboardMode.MEDIUMRAW if options.show_keycodes else KeyboardMode.RAW
        try:
            set_keyboard_mode(fd, wanted)
        except OSError as exc:
            _fail("ioctl KDSKBMODE", exc)
        print(
            f"press any key (program terminates {options.timeout}s "
            "after last keypress)...",
            flush=True,
        )
        _read_loop(fd, options)
    except _CaughtSignal as caught:
        if caught.is_timeout:
            status = 0
        else:
            print(f"caught signal {caught.signum}, cleaning up...", flush=True)
            status = 1
    finally:
        signal.alarm(0)
        try:
            _clean_up(fd, old_mode, old_attrs)
        finally:
            _restore_handlers(previous)
    return status


def main(argv=None) -> int:
    """Run the showkey command."""
    options = parse_args(sys.argv[1:] if argv is None else argv)
    if options.print_ascii:
        return _show_ascii(sys.stdin.fileno())
    return _show_console(options)


if __name__ == "__main__":
    sys.exit(main())