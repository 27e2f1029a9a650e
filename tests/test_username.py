from types import SimpleNamespace
from unittest import mock

import pytest

from kbdtools.vlock.username import UnknownUserError, get_username

ALICE = SimpleNamespace(pw_name="alice", pw_uid=1000)
BOB = SimpleNamespace(pw_name="bob", pw_uid=1001)


def _by_name(name):
    table = {"alice": ALICE, "bob": BOB}
    if name not in table:
        raise KeyError(name)
    return table[name]


def _by_uid(uid):
    table = {1000: ALICE, 1001: BOB}
    if uid not in table:
        raise KeyError(uid)
    return table[uid]


@mock.patch("pwd.getpwuid", side_effect=_by_uid)
@mock.patch("pwd.getpwnam", side_effect=_by_name)
def test_logname_matching_uid_is_used(getpwnam, getpwuid):
    assert get_username({"LOGNAME": "alice"}, 1000) == "alice"
    getpwuid.assert_not_called()


@mock.patch("pwd.getpwuid", side_effect=_by_uid)
@mock.patch("pwd.getpwnam", side_effect=_by_name)
def test_logname_of_other_uid_is_ignored(getpwnam, getpwuid):
    assert get_username({"LOGNAME": "bob"}, 1000) == "alice"


@mock.patch("pwd.getpwuid", side_effect=_by_uid)
@mock.patch("pwd.getpwnam", side_effect=_by_name)
def test_unknown_logname_falls_back_to_uid(getpwnam, getpwuid):
    assert get_username({"LOGNAME": "nobody-here"}, 1001) == "bob"


@mock.patch("pwd.getpwuid", side_effect=_by_uid)
@mock.patch("pwd.getpwnam", side_effect=_by_name)
def test_missing_logname_uses_uid(getpwnam, getpwuid):
    assert get_username({}, 1001) == "bob"
    getpwnam.assert_not_called()


@mock.patch("pwd.getpwuid", side_effect=_by_uid)
@mock.patch("pwd.getpwnam", side_effect=_by_name)
def test_unknown_uid_raises(getpwnam, getpwuid):
    with pytest.raises(UnknownUserError, match="unrecognized user"):
        get_username({"LOGNAME": "alice"}, 4242)