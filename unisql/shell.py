"""Helpers for the user's environment: files, editor, shell and quoting."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
import sys
import tempfile
from collections.abc import Callable, Mapping
from typing import IO, Any

from unisql.errors import (
    CannotIncludeDirectoriesError,
    InvalidQuotedStringError,
    NoEditorDefinedError,
    NoShellAvailableError,
    NoSuchFileOrDirectoryError,
    UnterminatedQuotedStringError,
)

__all__ = [
    "getenv",
    "expand_path",
    "chdir",
    "open_file",
    "edit_file",
    "history_file",
    "rc_file",
    "get_shell",
    "shell",
    "pipe",
    "exec_shell",
    "dequote",
    "get_var",
    "make_unquoter",
]

_COMMAND = "unisql"
_COMMAND_UPPER = _COMMAND.upper()

_CLEAN_DOUBLE_RE = re.compile(r"(^|[^\\])''")

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
}
_HEX_WIDTHS = {"x": 2, "u": 4, "U": 8}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCT_DIGITS = frozenset("01234567")


def getenv(*keys: str) -> str | None:
    """Return the value of the first defined environment variable in ``keys``."""
    for key in keys:
        if key in os.environ:
            return os.environ[key]
    return None


def expand_path(home: str, path: str) -> str:
    """Expand a leading ``~`` in ``path`` to ``home``."""
    if path == "~":
        return home
    if path.startswith("~/") or path.startswith("~" + os.sep):
        return os.path.join(home, path[2:])
    return path


def chdir(home: str, path: str = "") -> None:
    """Change directory to ``path``, or to ``home`` when ``path`` is empty."""
    os.chdir(expand_path(home, path) if path else home)


def open_file(home: str, path: str) -> tuple[str, IO[str]]:
    """Open ``path`` for reading, returning its resolved path and the file."""
    expanded = expand_path(home, path)
    if not os.path.lexists(expanded):
        raise NoSuchFileOrDirectoryError()
    resolved = os.path.realpath(expanded)
    if not os.path.exists(resolved):
        raise NoSuchFileOrDirectoryError()
    if os.path.isdir(resolved):
        raise CannotIncludeDirectoriesError()
    return resolved, open(resolved, encoding="utf-8")


def edit_file(home: str, path: str, line: str, s: str, editor: str) -> str:
    """Edit a file with ``editor`` and return its contents afterwards.

    When ``path`` is empty, ``s`` is written to a temporary file which is
    edited instead.
    """
    if not editor:
        editor = shutil.which("vi") or ""
        if not editor:
            raise NoEditorDefinedError()
    if path:
        path = expand_path(home, path)
    else:
        fd, path = tempfile.mkstemp(prefix=_COMMAND + ".", suffix=".sql")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(s.removesuffix("\n") + "\n")
    args = [path]
    if line:
        line_arg = getenv(_COMMAND_UPPER + "_EDITOR_LINENUMBER_ARG")
        args.append((line_arg if line_arg is not None else "+") + line)
    subprocess.run([editor, *args], check=True)
    with open(path, encoding="utf-8") as f:
        return f.read().removesuffix("\n")


def history_file(home: str) -> str:
    """Return the history file path, overridable by ``UNISQL_HISTORY``."""
    name = _COMMAND_UPPER + "_HISTORY"
    path = getenv(name)
    if path is None:
        path = "~/." + name.lower()
    return expand_path(home, path)


def rc_file(home: str) -> str:
    """Return the rc file path, overridable by ``UNISQLRC``."""
    name = _COMMAND_UPPER + "RC"
    path = getenv(name)
    if path is None:
        path = "~/." + name.lower()
    return expand_path(home, path)


def get_shell() -> tuple[str, str]:
    """Return the user's shell and the argument that runs a command string."""
    windows = sys.platform == "win32"
    found = getenv("SHELL")
    shell_path = found or ""
    param = "-c"
    if found is None and windows:
        shell_path = getenv("COMSPEC", "ComSpec") or ""
        param = "/c"
    if not shell_path and windows:
        shell_path = shutil.which("cmd.exe") or ""
        if shell_path:
            param = "/c"
    if not shell_path:
        shell_path = shutil.which("sh") or ""
        if shell_path:
            param = "-c"
    return shell_path, param


def shell(s: str = "") -> None:
    """Run ``s`` in the user's shell, or start an interactive shell."""
    shell_path, param = get_shell()
    if not shell_path:
        raise NoShellAvailableError()
    s = s.strip()
    args = [param, s] if s else []
    subprocess.run([shell_path, *args], check=False)


def pipe(command: str, stdout: Any = None, stderr: Any = None) -> subprocess.Popen:
    """Start ``command`` in the user's shell with a writable stdin."""
    shell_path, param = get_shell()
    if not shell_path:
        raise NoShellAvailableError()
    return subprocess.Popen(
        [shell_path, param, command],
        stdin=subprocess.PIPE,
        stdout=stdout,
        stderr=stderr,
    )


def exec_shell(s: str) -> str:
    """Run ``s`` in the user's shell and return its combined output."""
    s = s.strip()
    if not s:
        return ""
    shell_path, param = get_shell()
    if not shell_path:
        raise NoShellAvailableError()
    result = subprocess.run(
        [shell_path, param, s],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=True,
    )
    out = result.stdout.removesuffix(b"\n").removesuffix(b"\r")
    return out.decode("utf-8", errors="replace")


def _unquote_char(s: str, i: int, quote: str) -> tuple[int, bytes]:
    """Decode one possibly escaped character at ``s[i]``."""
    c = s[i]
    if c == quote and quote in ("'", '"'):
        raise InvalidQuotedStringError()
    if c != "\\":
        return i + 1, c.encode("utf-8")
    if i + 1 >= len(s):
        raise InvalidQuotedStringError()
    c = s[i + 1]
    i += 2
    if c in _SIMPLE_ESCAPES:
        return i, _SIMPLE_ESCAPES[c].encode("utf-8")
    if c in _HEX_WIDTHS:
        width = _HEX_WIDTHS[c]
        digits = s[i : i + width]
        if len(digits) < width or not set(digits) <= _HEX_DIGITS:
            raise InvalidQuotedStringError()
        value = int(digits, 16)
        i += width
        if c == "x":
            return i, bytes([value])
        if value > 0x10FFFF or 0xD800 <= value < 0xE000:
            raise InvalidQuotedStringError()
        return i, chr(value).encode("utf-8")
    if c in _OCT_DIGITS:
        digits = s[i - 1 : i + 2]
        if len(digits) < 3 or not set(digits) <= _OCT_DIGITS:
            raise InvalidQuotedStringError()
        value = int(digits, 8)
        if value > 255:
            raise InvalidQuotedStringError()
        return i + 2, bytes([value])
    if c in ("'", '"'):
        if c != quote:
            raise InvalidQuotedStringError()
        return i, c.encode("utf-8")
    raise InvalidQuotedStringError()


def dequote(s: str, quote: str) -> str:
    """Remove the surrounding ``quote`` from ``s`` and decode its escapes.

    In single-quoted strings a doubled ``''`` stands for one quote.
    """
    if len(s) < 2 or s[-1] != quote:
        raise UnterminatedQuotedStringError()
    body = s[1:-1]
    if quote == "'":
        body = _CLEAN_DOUBLE_RE.sub(r"\1\\'", body)
    buf = bytearray()
    i = 0
    while i < len(body):
        i, chunk = _unquote_char(body, i, quote)
        buf += chunk
    return buf.decode("utf-8", errors="replace")


def get_var(s: str, variables: Mapping[str, str]) -> tuple[bool, str]:
    """Look up variable ``s``, which may be quoted.

    Returns whether it was found and its value, re-wrapped in the same
    quotes; when not found, ``s`` itself is returned.
    """
    quote, name = "", s
    if s[:1] in ("'", '"'):
        quote = s[0]
        name = dequote(s, quote)
    if name in variables:
        return True, quote + variables[name] + quote
    return False, s


def make_unquoter(
    home: str, execute: bool, variables: Mapping[str, str]
) -> Callable[[str, bool], tuple[bool, str]]:
    """Return a function that unquotes strings and resolves variables.

    When ``execute`` is true, backtick-quoted strings are run in the
    user's shell and replaced by their output.
    """

    def unquote(s: str, isvar: bool = False) -> tuple[bool, str]:
        if isvar:
            return get_var(s, variables)
        if len(s) < 2:
            raise InvalidQuotedStringError()
        quote = s[0]
        value = dequote(s, quote)
        if quote in ("'", '"'):
            return True, value
        if quote != "`":
            raise InvalidQuotedStringError()
        if not execute:
            return True, value
        return True, exec_shell(value)

    return unquote