"""Find the login name of the user running the lock."""

import os
import pwd
from typing import Mapping, Optional


class UnknownUserError(LookupError):
    """Raised when no password entry matches the current user."""


def get_username(environ: Optional[Mapping[str, str]] = None, uid: Optional[int] = None) -> str:
    """Return the login name, preferring ``LOGNAME`` when it matches ``uid``."""
    if environ is None:
        environ = os.environ
    if uid is None:
        uid = os.getuid()

    entry = None
    logname = environ.get("LOGNAME")
    if logname:
        try:
            entry = pwd.getpwnam(logname)
        except KeyError:
            entry = None
        if entry is not None and entry.pw_uid != uid:
            entry = None

    if entry is None:
        try:
            entry = pwd.getpwuid(uid)
        except KeyError:
            raise UnknownUserError("unrecognized user") from None

    return entry.pw_name