"""Reader/writer for the shared ``KEY=VALUE`` secrets file.

Format:
  - one ``KEY=VALUE`` per line, ``#`` comment lines and blank lines ignored
  - a value may be wrapped in one pair of ``"`` or ``'`` quotes
  - double-quoted values understand ``\\\\``, ``\\"``, ``\\n`` and ``\\r``
  - values with whitespace, ``#``, quotes, ``\\`` or ``$`` are always written
    double-quoted, so ``parse(serialize(env)) == env``
"""

from __future__ import annotations

import re

KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_NEEDS_QUOTING = re.compile(r"[\s#\"'\\$]")

_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r"}


def is_valid_key(key: str) -> bool:
    return bool(KEY_PATTERN.fullmatch(key))


def needs_quoting(value: str) -> bool:
    return bool(_NEEDS_QUOTING.search(value))


def _escape(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def _unescape(value: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value) and value[i + 1] in _ESCAPES:
            out.append(_ESCAPES[value[i + 1]])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        inner = value[1:-1]
        return _unescape(inner) if value[0] == '"' else inner
    return value


def parse(content: str) -> dict[str, str]:
    """Parse env-file text into an insertion-ordered dict (last duplicate wins)."""
    env: dict[str, str] = {}
    for line in content.split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        env[key] = _unquote(value.strip())
    return env


def format_line(key: str, value: str) -> str:
    if needs_quoting(value):
        return f'{key}="{_escape(value)}"'
    return f"{key}={value}"


def serialize(env: dict[str, str]) -> str:
    """Render a mapping as env-file text, one line per key, newline-terminated."""
    if not env:
        return ""
    return "\n".join(format_line(k, v) for k, v in env.items()) + "\n"
