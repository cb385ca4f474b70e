"""SQL parameter normalization.

Statements are written with ``:name`` placeholders; drivers that bind with
``%(name)s`` get them rewritten here. String literals and PostgreSQL
``::typecast`` syntax are left alone.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Either a single-quoted literal (group 0 only) or a :name placeholder (group 1)
_TOKEN_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'|(?<![:\w]):([a-zA-Z_]\w*)")


def normalize_params(sql: str, paramstyle: str) -> str:
    """Rewrite ``:name`` placeholders for *paramstyle*.

    Args:
        sql: SQL text with ``:name`` placeholders.
        paramstyle: ``named`` (returned unchanged) or ``pyformat``.

    Returns:
        SQL text using the driver's placeholder syntax.
    """
    if paramstyle == "named":
        return sql
    return _to_pyformat(sql)


@lru_cache(maxsize=256)
def _to_pyformat(sql: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name is None:
            return match.group(0)
        return f"%({name})s"

    return _TOKEN_PATTERN.sub(_replace, sql)
