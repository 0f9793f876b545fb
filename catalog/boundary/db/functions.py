"""
Dialect-portable SQL functions used by aggregation queries.

Dependencies: sqlalchemy
System role: SQL helpers for the catalog aggregation pipelines
"""

from sqlalchemy import Integer
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.expression import FunctionElement

LIKE_ESCAPE = "\\"


class strpos(FunctionElement):
    """1-based position of a substring, 0 when absent: ``strpos(haystack, needle)``."""

    type = Integer()
    name = "strpos"
    inherit_cache = True


@compiles(strpos)
def _compile_strpos(element, compiler, **kw):
    return "strpos(%s)" % compiler.process(element.clauses, **kw)


@compiles(strpos, "sqlite")
def _compile_strpos_sqlite(element, compiler, **kw):
    return "instr(%s)" % compiler.process(element.clauses, **kw)


def escape_like(value: str, escape: str = LIKE_ESCAPE) -> str:
    """
    Escape LIKE wildcards so the value only matches literally.

    Args:
        value: Raw user-supplied text
        escape: Escape character passed to ``like(..., escape=...)``

    Returns:
        str: Text with the escape character, ``%`` and ``_`` escaped
    """
    return (
        value.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )
