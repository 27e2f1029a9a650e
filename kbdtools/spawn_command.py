"""Start a new console session whenever the spawn-console key is pressed."""

import argparse
import fcntl
import os
import signal
import subprocess
import sys
import time
from enum import Enum

from kbdtools.kd import KDSIGACCEPT

PROGRAM = "spawn_command"


class SpawnMode(Enum):
    """What is started on the new virtual console."""

    CONSOLE = "console"
    LOGIN = "login"


_COMMANDS = {
    SpawnMode.CONSOLE: "openvt -s -l bash",
    SpawnMode.LOGIN: "openvt -s -l -- login -h spawn",
}


def command_for(mode: SpawnMode) -> str:
    """Return the shell command run for a spawn mode."""
    return _COMMANDS[SpawnMode(mode)]


def _open_tty() -> int:
    try:
        return os.open("/dev/tty0", os.O_RDONLY)
    except FileNotFoundError:
        try:
            return os.open("/dev/vc/0", os.O_RDONLY)
        except OSError:
            return 0
    except OSError:
        return 0


def _fail(message: str, exc: OSError) -> None:
    print(f"{PROGRAM}: {message}: {os.strerror(exc.errno or 0)}", file=sys.stderr)
    raise SystemExit(1)


def main(argv=None) -> int:
    """Wait for the spawn-console signal and start a session on each one."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Start a session when the spawn-console key is pressed.",
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in SpawnMode],
        default=SpawnMode.CONSOLE.value,
        help="start a shell (console) or a login prompt (login)",
    )
    args = parser.parse_args(argv)
    command = command_for(SpawnMode(args.mode))

    fd = _open_tty()

    def on_hangup(signum, frame):
        try:
            subprocess.run(command, shell=True, check=False)
        except OSError as exc:
            _fail("system", exc)

    signal.signal(signal.SIGHUP, on_hangup)

    try:
        fcntl.ioctl(fd, KDSIGACCEPT, int(signal.SIGHUP))
    except OSError as exc:
        _fail("ioctl KDSIGACCEPT", exc)

    while True:
        time.sleep(3600)


if __name__ == "__main__":
    sys.exit(main())