"""Column-aware tokenizer for fixed-width process listings."""

import re

EOL = re.compile(r"\r\n|\n\r|\n|\r")
_TOKEN = re.compile(r"\S+")

Span = tuple[int, int]


def _spans(line: str) -> list[tuple[str, Span]]:
    return [(m.group(0), (m.start(), m.end())) for m in _TOKEN.finditer(line)]


def _overlap(a: Span, b: Span) -> int:
    return max(0, min(a[1], b[1]) - max(a[0], b[0]))


def _column_for(token: Span, headers: list[tuple[str, Span]]) -> int:
    """Pick the header index a token belongs to.

    The header with the largest overlap wins (leftmost on ties). A token
    under no header belongs to the nearest header starting at or before it,
    which is how overflowing trailing columns like COMMAND are captured.
    """
    best, best_overlap = -1, 0
    for idx, (_, span) in enumerate(headers):
        overlap = _overlap(token, span)
        if overlap > best_overlap:
            best, best_overlap = idx, overlap
    if best >= 0:
        return best

    for idx in range(len(headers) - 1, -1, -1):
        if headers[idx][1][0] <= token[0]:
            return idx
    return 0


def parse_table(text: str) -> list[dict[str, list[str]]]:
    lines = [line for line in EOL.split(text) if line.strip()]
    if not lines:
        return []

    headers = _spans(lines[0])
    records: list[dict[str, list[str]]] = []
    for line in lines[1:]:
        record: dict[str, list[str]] = {name: [] for name, _ in headers}
        for token, span in _spans(line):
            name = headers[_column_for(span, headers)][0]
            record[name].append(token)
        records.append(record)
    return records
