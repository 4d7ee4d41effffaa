"""Process lookup: list, normalize and filter the process table."""

import logging
import re
from dataclasses import dataclass

from proctable.errors import QueryError
from proctable.normalizer import normalize
from proctable.source import ProcessTableSource, default_source
from proctable.tokenizer import parse_table
from proctable.types import Pattern, ProcessRecord, Query

logger = logging.getLogger(__name__)


def _as_list(value: str | list[str] | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def _compile(name: str, value: Pattern) -> re.Pattern[str]:
    if isinstance(value, re.Pattern):
        return value
    try:
        return re.compile(str(value), re.IGNORECASE)
    except re.error as e:
        raise QueryError(f"Invalid {name} pattern {value!r}: {e}") from e


@dataclass
class _Filters:
    pids: set[str] | None
    patterns: dict[str, re.Pattern[str]]

    def matches(self, process: ProcessRecord) -> bool:
        if self.pids is not None and process.pid not in self.pids:
            return False

        for field, pattern in self.patterns.items():
            if field == "arguments":
                value = " ".join(process.arguments)
            else:
                value = getattr(process, field)
            if value is None or not pattern.search(value):
                return False
        return True


def build_filters(query: Query) -> _Filters:
    """Compile a Query into match predicates. Raises QueryError on bad patterns."""
    pids = None
    if query.pid is not None:
        id_list = query.pid if isinstance(query.pid, list) else [query.pid]
        pids = {str(pid) for pid in id_list}

    patterns: dict[str, re.Pattern[str]] = {}
    for field in ("command", "arguments", "ppid"):
        value = getattr(query, field)
        if value is not None and value != "":
            patterns[field] = _compile(field, value)

    return _Filters(pids=pids, patterns=patterns)


async def lookup(
    query: Query | None = None, *, source: ProcessTableSource | None = None
) -> list[ProcessRecord]:
    """List running processes matching every filter set on the query.

    Raises QueryError for an invalid pattern and SourceInvocationError when
    the listing command fails. No partial results are returned on error.
    """
    query = query or Query()
    source = source or default_source()
    filters = build_filters(query)

    args = _as_list(query.psargs) or list(source.default_args)
    keywords = query.keywords or []
    if isinstance(keywords, str):
        keywords = [keywords]

    output = await source.list(args)
    if not output:
        return []

    processes = normalize(parse_table(output), keywords, source)
    matched = [p for p in processes if filters.matches(p)]
    logger.debug("Lookup matched %d of %d processes", len(matched), len(processes))
    return matched
