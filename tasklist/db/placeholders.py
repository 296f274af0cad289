"""Translation of canonical ``$n`` placeholders into driver paramstyles.

Callers write statements with 1-based numbered placeholders (``$1``,
``$2``...). SQLite's driver wants ``?`` and psycopg wants ``%s``, both
strictly positional, so parameters are reordered (and repeated) to follow
the order in which placeholders occur in the statement.
"""

import re
from collections.abc import Sequence
from typing import Any

from tasklist.db.errors import MalformedStatementError

QMARK = "qmark"
FORMAT = "format"

_MARKERS = {QMARK: "?", FORMAT: "%s"}

# Quoted literals and identifiers are matched whole so placeholders inside
# them are never rewritten.
_TOKEN = re.compile(
    r"""
    '(?:[^']|'')*'
  | "(?:[^"]|"")*"
  | \$(?P<index>\d+)
    """,
    re.VERBOSE,
)


def translate(
    statement: str, params: Sequence[Any], paramstyle: str
) -> tuple[str, tuple[Any, ...]]:
    """Rewrite ``statement`` for ``paramstyle`` and order ``params`` to match.

    Raises:
        MalformedStatementError: If a placeholder has no matching parameter,
            or parameters are given for a statement without placeholders.
    """
    if paramstyle not in _MARKERS:
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")

    pieces: list[str | int] = []
    position = 0
    for match in _TOKEN.finditer(statement):
        index = match.group("index")
        if index is None:
            continue
        pieces.append(statement[position:match.start()])
        pieces.append(int(index))
        position = match.end()
    pieces.append(statement[position:])

    if len(pieces) == 1:
        if params:
            raise MalformedStatementError(
                f"Statement takes no parameters but {len(params)} were given"
            )
        return statement, ()

    marker = _MARKERS[paramstyle]
    sql_parts: list[str] = []
    values: list[Any] = []
    for piece in pieces:
        if isinstance(piece, int):
            if not 1 <= piece <= len(params):
                raise MalformedStatementError(
                    f"Placeholder ${piece} has no matching parameter ({len(params)} given)"
                )
            sql_parts.append(marker)
            values.append(params[piece - 1])
        elif paramstyle == FORMAT:
            sql_parts.append(piece.replace("%", "%%"))
        else:
            sql_parts.append(piece)

    return "".join(sql_parts), tuple(values)
