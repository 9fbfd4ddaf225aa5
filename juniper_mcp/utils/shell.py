"""Shell quoting helpers for generated askpass scripts."""

import shlex


def quote_posix(arg: str) -> str:
    """Quote an argument for a POSIX shell.

    Args:
        arg: Argument to quote

    Returns:
        Shell-safe quoted argument
    """
    return shlex.quote(arg)


def quote_powershell(value: str) -> str:
    """Quote a value as a single-quoted PowerShell string literal."""
    return "'" + value.replace("'", "''") + "'"
