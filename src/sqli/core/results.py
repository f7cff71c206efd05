from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

MAX_COLUMN_WIDTH = 40


@dataclass(frozen=True)
class QueryResult:
    """Rows returned by a query driver, already converted to display strings."""

    columns: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @classmethod
    def from_values(
        cls, columns: Sequence[str], rows: Sequence[Sequence[object]], elapsed_ms: float = 0.0
    ) -> QueryResult:
        return cls(
            list(columns),
            [["NULL" if v is None else str(v) for v in row] for row in rows],
            elapsed_ms,
        )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.columns

    def summary(self) -> str:
        return f"Query time: {self.elapsed_ms:.0f}ms | {self.row_count} rows"

