"""Column extraction from native index definitions.

PostgreSQL exposes indexes as DDL text (``pg_indexes.indexdef``). Parsing is a
best-effort heuristic; dialects needing stricter parsing supply their own
``IndexColumnParser``.
"""

import re
from typing import List, Protocol, runtime_checkable

_FIRST_GROUP = re.compile(r"\((.*?)\)")


@runtime_checkable
class IndexColumnParser(Protocol):
    """Extracts the ordered column list from an index definition."""

    def parse(self, index_def: str) -> List[str]:
        """Return the indexed columns, in definition order."""
        ...


class ParenthesizedIndexColumnParser:
    """Take the first parenthesized group, split on commas and trim.

    Expression indexes yield the literal inner text, e.g.
    ``btree (lower((email)::text))`` gives ``["lower((email"]``.
    """

    def parse(self, index_def: str) -> List[str]:
        match = _FIRST_GROUP.search(index_def or "")
        if not match:
            return []
        return [column.strip() for column in match.group(1).split(",")]
