from typing import Any, Callable, Dict, List

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

SUPPORTED_DIALECTS = tuple(_INSERTS)


class UnsupportedDatabaseError(RuntimeError):
    pass


def ensure_supported_dialect(dialect_name: str) -> None:
    # Identity and hardware writes need a native unique-key upsert
    if dialect_name not in _INSERTS:
        raise UnsupportedDatabaseError(
            f"Database dialect {dialect_name!r} is not supported; use one of {', '.join(SUPPORTED_DIALECTS)}"
        )


def upsert(
    db: Session,
    model: Any,
    values: Dict[str, Any],
    index_elements: List[str],
    build_update: Callable[[Any], Dict[str, Any]],
) -> None:
    """INSERT ... ON CONFLICT DO UPDATE keyed on a unique constraint.

    ``build_update`` receives the statement's ``excluded`` pseudo-table and
    returns the SET clause, so callers can compare incoming and stored values
    inside the database instead of reading first.
    """
    insert = _INSERTS[db.get_bind().dialect.name]
    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(index_elements=index_elements, set_=build_update(stmt.excluded))
    db.execute(stmt)
