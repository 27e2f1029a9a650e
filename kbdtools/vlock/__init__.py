"""Helpers for locking virtual terminals: options, screen saving, user lookup and VT control."""