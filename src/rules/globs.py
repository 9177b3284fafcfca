# src/rules/globs.py — v1
"""Glob pattern → compiled regex, with ``**`` directory semantics.

Supported syntax:
  **      any number of path segments, including none (``src/**/*.ts``
          matches ``src/a.ts``)
  *       any run of characters within one segment
  ?       one character within a segment
  [...]   character class (``[!...]`` negates)
  {a,b}   alternation, may nest
"""

from __future__ import annotations

import re
from functools import lru_cache


def normalize_path(path: str) -> str:
    """Forward slashes, no leading ``./``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern into an anchored regex."""
    return re.compile(r"\A" + _translate(normalize_path(pattern)) + r"\Z")


def match_glob(path: str, pattern: str) -> bool:
    """Return True if ``path`` matches ``pattern``."""
    return compile_glob(pattern).match(normalize_path(path)) is not None


def _translate(pat: str) -> str:
    out: list[str] = []
    i, n = 0, len(pat)
    depth = 0  # open brace groups
    while i < n:
        c = pat[i]
        if c == "*":
            if pat.startswith("**", i):
                at_start = i == 0 or pat[i - 1] == "/"
                j = i + 2
                if at_start and j < n and pat[j] == "/":
                    # "**/" → zero or more whole segments
                    out.append(r"(?:[^/]*/)*")
                    i = j + 1
                    continue
                if at_start and j == n:
                    out.append(r".*")
                    i = j
                    continue
                out.append(r"[^/]*")
                i = j
                continue
            out.append(r"[^/]*")
        elif c == "?":
            out.append(r"[^/]")
        elif c == "[":
            j = pat.find("]", i + 2 if i + 1 < n and pat[i + 1] in "!^" else i + 1)
            if j == -1:
                out.append(re.escape(c))
            else:
                body = pat[i + 1 : j]
                negate = body[:1] in ("!", "^")
                if negate:
                    body = body[1:]
                body = body.replace("\\", "\\\\")
                out.append(f"[{'^' if negate else ''}{body}]")
                i = j
        elif c == "{":
            depth += 1
            out.append("(?:")
        elif c == "}" and depth:
            depth -= 1
            out.append(")")
        elif c == "," and depth:
            out.append("|")
        else:
            out.append(re.escape(c))
        i += 1
    out.extend(")" * depth)
    return "".join(out)
