"""Insert-if-absent keyed on a unique constraint.

Used by the find-or-create repositories: the row is inserted with
``ON CONFLICT DO NOTHING`` and then read back, so two callers racing on the
same natural key both end up with the single stored row.
"""
from typing import Any, Sequence
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

async def insert_ignore_conflict(session: AsyncSession, model: type, conflict_columns: Sequence[str], values: dict[str, Any]) -> None:
    dialect = session.bind.dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise NotImplementedError(f"insert-on-conflict is not supported for dialect {dialect!r}")
    stmt = insert(model).values(**values).on_conflict_do_nothing(index_elements=list(conflict_columns))
    await session.execute(stmt)
