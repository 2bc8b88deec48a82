"""Reader for tab-delimited association files.

The first non-comment line names the namespace of every column. Each later
line is one record: the first column holds subject identifiers, the remaining
columns candidate identifiers. A field may list several identifiers separated
by commas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from xrefsync.domain.ports.persistence import StagedAssociation

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

log = logging.getLogger(__name__)

FIELD_SEPARATOR: Final[str] = "\t"
IDENTIFIER_SEPARATOR: Final[str] = ","
COMMENT_PREFIX: Final[str] = "#"
MIN_FIELD_COUNT: Final[int] = 2


class RecordFormatError(ValueError):
    """Raised when a line of an association file cannot be interpreted."""

    def __init__(self, *, source: str, line_number: int, line: str, reason: str) -> None:
        self.source = source
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"{source}:{line_number}: {reason}: {line!r}")


@dataclass(frozen=True, slots=True)
class AssociationFile:
    namespaces: tuple[str, ...]
    records: tuple[StagedAssociation, ...]
    record_count: int = 0


def parse_association_lines(lines: Iterable[str], *, source: str = "<input>") -> AssociationFile:
    """Interpret association file ``lines`` into staged identifiers."""

    namespaces: tuple[str, ...] | None = None
    records: list[StagedAssociation] = []
    record_key = 0

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip() or line.startswith(COMMENT_PREFIX):
            continue

        fields = line.split(FIELD_SEPARATOR)
        if namespaces is None:
            if len(fields) < MIN_FIELD_COUNT:
                raise RecordFormatError(
                    source=source,
                    line_number=line_number,
                    line=line,
                    reason=f"header needs at least {MIN_FIELD_COUNT} namespace columns",
                )
            namespaces = tuple(field.strip() for field in fields)
            if any(not name for name in namespaces):
                raise RecordFormatError(
                    source=source,
                    line_number=line_number,
                    line=line,
                    reason="header contains an empty namespace name",
                )
            continue

        if len(fields) != len(namespaces):
            raise RecordFormatError(
                source=source,
                line_number=line_number,
                line=line,
                reason=f"expected {len(namespaces)} fields, found {len(fields)}",
            )

        record_key += 1
        for column, (field, namespace) in enumerate(zip(fields, namespaces, strict=True)):
            for value in field.split(IDENTIFIER_SEPARATOR):
                identifier = value.strip()
                if not identifier:
                    continue
                records.append(
                    StagedAssociation(
                        record_key=record_key,
                        identifier=identifier,
                        namespace_name=namespace,
                        is_subject=column == 0,
                    )
                )

    if namespaces is None:
        raise RecordFormatError(
            source=source, line_number=0, line="", reason="missing namespace header"
        )

    log.debug("Read %s records (%s identifiers) from %s", record_key, len(records), source)
    return AssociationFile(
        namespaces=namespaces, records=tuple(records), record_count=record_key
    )


def read_association_file(path: Path) -> AssociationFile:
    with path.open(encoding="utf-8") as handle:
        return parse_association_lines(handle, source=str(path))
