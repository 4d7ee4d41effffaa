"""Map tokenized listing rows onto ProcessRecords."""

from collections.abc import Iterable, Mapping, Sequence

from proctable.source import ProcessTableSource
from proctable.types import ProcessRecord

# Candidate headers per field, ps spellings first then wmic
_PID_COLUMNS = ("PID", "ProcessId")
_PPID_COLUMNS = ("PPID", "ParentProcessId")
_COMMAND_COLUMNS = ("CMD", "CommandLine", "COMMAND")

RawRecord = Mapping[str, Sequence[str]]


def _first_cell(record: RawRecord, columns: Iterable[str]) -> Sequence[str] | None:
    for column in columns:
        cell = record.get(column)
        if cell:
            return cell
    return None


def normalize_record(
    record: RawRecord, keywords: Sequence[str], source: ProcessTableSource
) -> ProcessRecord | None:
    """Build one ProcessRecord, or None when pid or command is missing."""
    pid_cell = _first_cell(record, _PID_COLUMNS)
    command_cell = _first_cell(record, _COMMAND_COLUMNS)
    if not pid_cell or not command_cell:
        return None

    ppid_cell = _first_cell(record, _PPID_COLUMNS)

    extras: dict[str, str] = {}
    for keyword in keywords:
        cell = record.get(source.column_name(keyword))
        if cell:
            extras[keyword] = cell[0]

    return ProcessRecord(
        pid=pid_cell[0],
        command=command_cell[0],
        arguments=list(command_cell[1:]),
        ppid=ppid_cell[0] if ppid_cell else None,
        extras=extras,
    )


def normalize(
    records: Iterable[RawRecord],
    keywords: Sequence[str],
    source: ProcessTableSource,
) -> list[ProcessRecord]:
    normalized = []
    for record in records:
        process = normalize_record(record, keywords, source)
        if process is not None:
            normalized.append(process)
    return normalized
