"""Runtime variables, display settings and named connections."""

from __future__ import annotations

import locale as _locale
import os
import re
import shutil
import sys
import unicodedata
import zoneinfo
from dataclasses import dataclass, field
from typing import TextIO

from unisql.errors import InvalidIdentifierError, InvalidValueError, UnknownFieldError
from unisql.shell import getenv

__all__ = [
    "valid_identifier",
    "parse_bool",
    "parse_keyword_bool",
    "build_config_dir",
    "Settings",
]

_COMMAND = "unisql"
_COMMAND_UPPER = _COMMAND.upper()

_TRUE_WORDS = frozenset({"1", "t", "tr", "tru", "true", "on"})
_FALSE_WORDS = frozenset({"0", "f", "fa", "fal", "fals", "false", "of", "off"})

_FORMAT_RE = re.compile(
    r"^(unaligned|aligned|wrapped|html|asciidoc|latex|latex-longtable|troff-ms|csv|json|vertical)$"
)
_LINESTYLE_RE = re.compile(r"^(ascii|old-ascii|unicode)$")
_BORDER_RE = re.compile(r"^(single|double)$")
_INT_RE = re.compile(r"[+-]?[0-9]+")

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_INT_FIELDS = frozenset({"border", "columns", "pager_min_lines"})
_BOOL_FIELDS = frozenset(
    {"fieldsep_zero", "footer", "numericlocale", "recordsep_zero", "tuples_only"}
)
_UNICODE_FIELDS = frozenset(
    {"unicode_border_linestyle", "unicode_column_linestyle", "unicode_header_linestyle"}
)

# Well known time layouts, by name.
_TIME_CONSTS = {
    "ANSIC": "Mon Jan _2 15:04:05 2006",
    "UnixDate": "Mon Jan _2 15:04:05 MST 2006",
    "RubyDate": "Mon Jan 02 15:04:05 -0700 2006",
    "RFC822": "02 Jan 06 15:04 MST",
    "RFC822Z": "02 Jan 06 15:04 -0700",
    "RFC850": "Monday, 02-Jan-06 15:04:05 MST",
    "RFC1123": "Mon, 02 Jan 2006 15:04:05 MST",
    "RFC1123Z": "Mon, 02 Jan 2006 15:04:05 -0700",
    "RFC3339": "2006-01-02T15:04:05Z07:00",
    "RFC3339Nano": "2006-01-02T15:04:05.999999999Z07:00",
    "Kitchen": "3:04PM",
    "Stamp": "Jan _2 15:04:05",
    "StampMilli": "Jan _2 15:04:05.000",
    "StampMicro": "Jan _2 15:04:05.000000",
    "StampNano": "Jan _2 15:04:05.000000000",
}

_VAR_NAMES = [
    (
        "ECHO_HIDDEN",
        'if set, display internal queries executed by backslash commands; if set to "noexec", just show them without execution',
    ),
    ("ON_ERROR_STOP", "stop batch execution after error"),
    ("PROMPT1", "specifies the standard " + _COMMAND + " prompt"),
    ("QUIET", "run quietly (same as -q option)"),
    ("ROW_COUNT", "number of rows returned or affected by last query, or 0"),
]

_PVAR_NAMES = [
    ("border", "border style (number)"),
    ("columns", "target width for the wrapped format"),
    ("csv_fieldsep", 'field separator for CSV output (default ",")'),
    ("expanded", "expanded output [on, off, auto]"),
    ("fieldsep", 'field separator for unaligned output (default "|")'),
    ("fieldsep_zero", "set field separator for unaligned output to a zero byte"),
    ("footer", "enable or disable display of the table footer [on, off]"),
    (
        "format",
        "set output format [unaligned, aligned, wrapped, vertical, html, asciidoc, csv, json, ...]",
    ),
    ("linestyle", "set the border line drawing style [ascii, old-ascii, unicode]"),
    ("null", "set the string to be printed in place of a null value"),
    (
        "numericlocale",
        "enable display of a locale-specific character to separate groups of digits",
    ),
    (
        "pager_min_lines",
        "minimum number of lines required in the output to use a pager, 0 to disable (default)",
    ),
    ("pager", "control when an external pager is used [on, off, always]"),
    ("recordsep", "record (line) separator for unaligned output"),
    ("recordsep_zero", "set record separator for unaligned output to a zero byte"),
    (
        "tableattr",
        "specify attributes for table tag in html format, or proportional column widths for left-aligned data types in latex-longtable format",
    ),
    ("time", 'format used to display time/date column values (default "RFC3339Nano")'),
    ("timezone", "the timezone to display dates in (default '')"),
    ("title", "set the table title for subsequently printed tables"),
    ("tuples_only", "if set, only actual table data is shown"),
    ("unicode_border_linestyle", "set the style of Unicode line drawing [single, double]"),
    ("unicode_column_linestyle", "set the style of Unicode line drawing [single, double]"),
    ("unicode_header_linestyle", "set the style of Unicode line drawing [single, double]"),
]

_ENV_VAR_NAMES = [
    (
        _COMMAND_UPPER + "_EDITOR, EDITOR, VISUAL",
        "editor used by the \\e, \\ef, and \\ev commands",
    ),
    (
        _COMMAND_UPPER + "_EDITOR_LINENUMBER_ARG",
        "how to specify a line number when invoking the editor",
    ),
    (_COMMAND_UPPER + "_HISTORY", "alternative location for the command history file"),
    (_COMMAND_UPPER + "_PAGER, PAGER", "name of external pager program"),
    (
        _COMMAND_UPPER + "_SHOW_HOST_INFORMATION",
        "display host information when connecting to a database",
    ),
    (_COMMAND_UPPER + "RC", "alternative location for the user's ." + _COMMAND + "rc file"),
    (
        _COMMAND_UPPER + "_SSLMODE, SSLMODE",
        "when set to 'retry', allows connections to attempt to reconnect when no ?sslmode= was specified on the url",
    ),
    ("SYNTAX_HL", "enable syntax highlighting"),
    ("SYNTAX_HL_FORMAT", "chroma library formatter name"),
    ("SYNTAX_HL_STYLE", 'chroma library style name (default "monokai")'),
    ("SYNTAX_HL_OVERRIDE_BG", "enables overriding the background color of the chroma styles"),
    ("TERM_GRAPHICS", "use the specified terminal graphics"),
    ("SHELL", "shell used by the \\! command"),
]

_LISTING_TEMPLATE = """List of specially treated variables

{cmd} variables:
Usage:
  {cmd} --set=NAME=VALUE
  or \\set NAME VALUE inside {cmd}

{vars}

Display settings:
Usage:
  {cmd} --pset=NAME[=VALUE]
  or \\pset NAME [VALUE] inside {cmd}

{pvars}

Environment variables:
Usage:
  NAME=VALUE [NAME=VALUE] {cmd} ...
  or \\setenv NAME [VALUE] inside {cmd}

{envvars}

Connection variables:
Usage:
  {cmd} --cset NAME[=DSN]
  or \\cset NAME [DSN] inside {cmd}
  or \\cset NAME DRIVER PARAMS... inside {cmd}
  or define in {config_dir}{config_extra}
"""

_QUOTE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def _quote_ascii(s: str) -> str:
    """Double-quote ``s``, escaping everything that is not printable ASCII."""
    parts = ['"']
    for ch in s:
        code = ord(ch)
        if ch in _QUOTE_ESCAPES:
            parts.append(_QUOTE_ESCAPES[ch])
        elif 0x20 <= code < 0x7F:
            parts.append(ch)
        elif code < 0x20 or code == 0x7F:
            parts.append(f"\\x{code:02x}")
        elif code < 0x10000:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    parts.append('"')
    return "".join(parts)


def _describe(entries: list[tuple[str, str]]) -> str:
    return "".join(f"  {name}\n    {desc}\n" for name, desc in entries).rstrip()


def _atoi(value: str) -> int:
    """Parse a decimal integer, yielding 0 when it is not one."""
    if not _INT_RE.fullmatch(value):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(value)))


def _valid_timezone(value: str) -> bool:
    if value in ("", "UTC", "Local"):
        return True
    try:
        zoneinfo.ZoneInfo(value)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def valid_identifier(name: str) -> None:
    """Raise :class:`InvalidIdentifierError` unless ``name`` is an identifier.

    An identifier is one or more letters, numbers or underscores.
    """
    if not name:
        raise InvalidIdentifierError()
    for ch in name:
        if ch != "_" and not unicodedata.category(ch)[0] in ("L", "N"):
            raise InvalidIdentifierError()


def parse_bool(value: str, name: str) -> str:
    """Normalize a boolean word for setting ``name`` to ``on`` or ``off``."""
    v = value.lower()
    if v in _TRUE_WORDS:
        return "on"
    if v in _FALSE_WORDS:
        return "off"
    raise InvalidValueError(value, name, "Boolean")


def parse_keyword_bool(value: str, name: str, *keywords: str) -> str:
    """Like :func:`parse_bool`, but also accept any of ``keywords``."""
    v = value.lower()
    if v in _TRUE_WORDS:
        return "on"
    if v in _FALSE_WORDS:
        return "off"
    if v in keywords:
        return v
    raise InvalidValueError(value, name)


def _user_config_dir() -> str | None:
    if sys.platform == "win32":
        return os.environ.get("APPDATA") or None
    home = os.environ.get("HOME", "")
    if sys.platform == "darwin":
        return os.path.join(home, "Library", "Application Support") if home else None
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return xdg if os.path.isabs(xdg) else None
    return os.path.join(home, ".config") if home else None


def build_config_dir(config_name: str) -> tuple[str, str]:
    """Return the displayed config file path and the resolved one.

    The resolved path is empty when the user's config directory is unknown.
    """
    display = "$HOME/.config/" + _COMMAND
    if sys.platform == "darwin":
        display = "$HOME/Library/Application Support"
    elif sys.platform == "win32":
        display = "%AppData%\\" + _COMMAND
    display_path = os.path.join(display, config_name)
    config_dir = _user_config_dir()
    if config_dir is None:
        return display_path, ""
    try:
        config_dir = os.path.realpath(config_dir)
    except OSError:
        return display_path, ""
    return display_path, os.path.join(config_dir, _COMMAND, config_name)


def _color_level() -> int:
    """Estimate the terminal colour support: 0 none, 1 basic, 2 256, 3 true."""
    colorterm = os.environ.get("COLORTERM", "").lower()
    term = os.environ.get("TERM", "").lower()
    if colorterm in ("truecolor", "24bit"):
        return 3
    if "256color" in term:
        return 2
    if term and term != "dumb":
        return 1
    return 0


_FORMATTER_NAMES = {0: "noop", 1: "terminal", 2: "terminal256", 3: "terminal16m"}


def _system_locale() -> str:
    try:
        name = _locale.getlocale()[0]
    except ValueError:
        name = None
    if not name or name in ("C", "POSIX"):
        return "en-US"
    return name.split(".")[0].replace("_", "-")


def _default_vars() -> dict[str, str]:
    return {
        "SHOW_HOST_INFORMATION": "true",
        "PAGER": "",
        "EDITOR": "",
        "QUIET": "off",
        "ON_ERROR_STOP": "off",
        "PROMPT1": "%S%N%m%/%R%# ",
        "SYNTAX_HL": "false",
        "SYNTAX_HL_FORMAT": _FORMATTER_NAMES[0],
        "SYNTAX_HL_STYLE": "monokai",
        "SYNTAX_HL_OVERRIDE_BG": "true",
        "SSLMODE": "retry",
        "TERM_GRAPHICS": "none",
    }


def _default_pvars() -> dict[str, str]:
    return {
        "border": "1",
        "columns": "0",
        "csv_fieldsep": ",",
        "expanded": "off",
        "fieldsep": "|",
        "fieldsep_zero": "off",
        "footer": "on",
        "format": "aligned",
        "linestyle": "ascii",
        "locale": "en-US",
        "null": "",
        "numericlocale": "off",
        "pager_min_lines": "0",
        "pager": "off",
        "recordsep": "\n",
        "recordsep_zero": "off",
        "tableattr": "",
        "time": "RFC3339Nano",
        "timezone": "",
        "title": "",
        "tuples_only": "off",
        "unicode_border_linestyle": "single",
        "unicode_column_linestyle": "single",
        "unicode_header_linestyle": "single",
    }


@dataclass
class Settings:
    """Variables, display (p) settings and named connections of a session."""

    vars: dict[str, str] = field(default_factory=_default_vars)
    pvars: dict[str, str] = field(default_factory=_default_pvars)
    cvars: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_environment(cls) -> Settings:
        """Build settings with defaults taken from the process environment."""
        show_host = getenv(_COMMAND_UPPER + "_SHOW_HOST_INFORMATION") or "true"
        no_color_value = getenv("NO_COLOR")
        no_color = no_color_value is not None and no_color_value not in ("0", "false", "off")
        level = _color_level()
        syntax_hl = "false" if no_color or level < 1 else "true"

        pager_cmd = getenv(_COMMAND_UPPER + "_PAGER", "PAGER")
        if pager_cmd is None:
            pager_cmd = next(
                (name for name in ("less", "more") if shutil.which(name)), ""
            )
        pager = "on" if pager_cmd else "off"

        editor = getenv(_COMMAND_UPPER + "_EDITOR", "EDITOR", "VISUAL") or ""
        sslmode = getenv(_COMMAND_UPPER + "_SSLMODE", "SSLMODE")
        if sslmode is None:
            sslmode = "retry"

        variables = _default_vars()
        variables.update(
            {
                "SHOW_HOST_INFORMATION": show_host,
                "PAGER": pager_cmd,
                "EDITOR": editor,
                "SYNTAX_HL": syntax_hl,
                "SYNTAX_HL_FORMAT": _FORMATTER_NAMES[level],
                "SSLMODE": sslmode,
            }
        )
        pvariables = _default_pvars()
        pvariables["pager"] = pager
        pvariables["locale"] = _system_locale()
        return cls(vars=variables, pvars=pvariables)

    # variables

    def set(self, name: str, value: str) -> None:
        """Set variable ``name``; ON_ERROR_STOP and QUIET take booleans."""
        valid_identifier(name)
        if name in ("ON_ERROR_STOP", "QUIET"):
            value = "on" if value == "" else parse_bool(value, name)
        self.vars[name] = value

    def unset(self, name: str) -> None:
        """Remove variable ``name``."""
        valid_identifier(name)
        self.vars.pop(name, None)

    def get(self, name: str) -> str:
        """Return variable ``name``, or an empty string."""
        return self.vars.get(name, "")

    def all(self) -> dict[str, str]:
        """Return a copy of all variables."""
        return dict(self.vars)

    # display settings

    def pall(self) -> dict[str, str]:
        """Return a copy of all display settings."""
        return dict(self.pvars)

    def pget(self, name: str) -> str:
        """Return display setting ``name``."""
        if name not in self.pvars:
            raise UnknownFieldError(name)
        return self.pvars[name]

    def ptoggle(self, name: str, extra: str = "") -> str:
        """Toggle display setting ``name`` and return its new value."""
        if name not in self.pvars:
            raise UnknownFieldError(name)
        current = self.pvars[name]
        if name == "pager":
            self.pvars[name] = self._flip(name, current, ("on", "always"))
        elif name == "expanded":
            self.pvars[name] = self._flip(name, current, ("on", "auto"))
        elif name in _BOOL_FIELDS:
            self.pvars[name] = self._flip(name, current, ("on",))
        elif name == "format":
            if extra and current != extra:
                self.pvars[name] = extra
            elif current == "aligned":
                self.pvars[name] = "unaligned"
            else:
                self.pvars[name] = "aligned"
        elif name in ("tableattr", "title"):
            self.pvars[name] = ""
        return self.pvars[name]

    @staticmethod
    def _flip(name: str, current: str, on_values: tuple[str, ...]) -> str:
        if current in on_values:
            return "off"
        if current == "off":
            return "on"
        raise RuntimeError(f"invalid state for field {name}")

    def pset(self, name: str, value: str) -> str:
        """Set display setting ``name`` and return the stored value."""
        if name not in self.pvars:
            raise UnknownFieldError(name)
        if name in _INT_FIELDS:
            stored = str(_atoi(value))
        elif name == "pager":
            try:
                stored = parse_keyword_bool(value, name, "always")
            except InvalidValueError:
                raise InvalidValueError(value, name, "on, off or always") from None
        elif name == "expanded":
            try:
                stored = parse_keyword_bool(value, name, "auto")
            except InvalidValueError:
                raise InvalidValueError(value, name, "on, off or auto") from None
        elif name in _BOOL_FIELDS:
            stored = parse_bool(value, name)
        elif name == "format":
            if not _FORMAT_RE.match(value):
                raise InvalidValueError(value, name, "a known output format")
            stored = value
        elif name == "linestyle":
            if not _LINESTYLE_RE.match(value):
                raise InvalidValueError(value, name, "ascii, old-ascii or unicode")
            stored = value
        elif name == "timezone":
            if not _valid_timezone(value):
                raise InvalidValueError(value, name, "a timezone location")
            stored = value
        elif name in _UNICODE_FIELDS:
            if not _BORDER_RE.match(value):
                raise InvalidValueError(value, name, "single or double")
            stored = value
        else:
            stored = value
        self.pvars[name] = stored
        return stored

    def pwrite(self, out: TextIO) -> None:
        """Write all display settings to ``out``, one per line, sorted."""
        width = max((len(k) for k in self.pvars), default=0)
        for key in sorted(self.pvars):
            val = self.pvars[key]
            if key in ("csv_fieldsep", "fieldsep", "recordsep", "null"):
                val = _quote_ascii(val)
            elif key in ("tableattr", "title") and val:
                val = _quote_ascii(val)
            out.write(f"{key.ljust(width)} {val}\n")

    # named connections

    def cset(self, name: str, *vals: str) -> None:
        """Define the named connection ``name``; an empty value removes it."""
        valid_identifier(name)
        if not vals or (vals[0] == "" and name in self.cvars):
            self.cvars.pop(name, None)
        else:
            self.cvars[name] = list(vals)

    def cget(self, name: str) -> list[str] | None:
        """Return a copy of the named connection, or ``None``."""
        vals = self.cvars.get(name)
        return None if vals is None else list(vals)

    def call(self) -> dict[str, list[str]]:
        """Return a copy of all named connections."""
        return {k: list(v) for k, v in self.cvars.items()}

    # misc

    def go_time(self) -> str:
        """Return the configured time layout, resolving well known names."""
        tfmt = self.pvars.get("time", "")
        return _TIME_CONSTS.get(tfmt, tfmt)

    def listing(self, out: TextIO) -> None:
        """Write a description of all specially treated variables to ``out``."""
        config_dir, config_extra = build_config_dir("config.yaml")
        config_desc = config_extra or config_dir
        env_entries = [
            (_COMMAND_UPPER + "_CONFIG", f"config file path (default {_quote_ascii(config_desc)})"),
            *_ENV_VAR_NAMES,
        ]
        out.write(
            _LISTING_TEMPLATE.format(
                cmd=_COMMAND,
                vars=_describe(_VAR_NAMES),
                pvars=_describe(_PVAR_NAMES),
                envvars=_describe(env_entries),
                config_dir=config_dir,
                config_extra=f" ({config_extra})" if config_extra else "",
            )
        )