"""Repository read helpers."""

from sqlalchemy import bindparam, text
from sqlalchemy.orm import Session

_PAGE_SIZE = 500


def fetch_all(repo, **filters) -> list:
    """Every record matching ``filters``, read page by page past the query's default limit."""
    query = repo._dao.query
    if filters:
        query = query.filter(**filters)

    items = []
    offset = 0
    while True:
        result = query.offset(offset).limit(_PAGE_SIZE).all()
        items.extend(result.items)
        offset += _PAGE_SIZE
        if not result.items or offset >= result.total:
            return items


def lock_rows(repo, column, values) -> None:
    """Take ``SELECT ... FOR UPDATE`` locks on rows whose ``column`` is in ``values``.

    Locks live until the current unit of work commits or rolls back, so call
    this before reading the rows. Only SQL sessions lock; writers on other
    providers are serialized by ``process_exclusively``.
    """
    session = repo._dao._get_session()
    if not isinstance(session, Session):
        return

    table = repo._dao.entity_cls.meta_.schema_name
    statement = text(f"SELECT id FROM {table} WHERE {column} IN :values FOR UPDATE").bindparams(
        bindparam("values", expanding=True)
    )
    # Fixed order so two writers never wait on each other's rows
    session.execute(statement, {"values": sorted({str(value) for value in values})})
