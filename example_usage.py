"""
Example usage of grid-query with both execution backends.

Seeds a small SQLite database and answers the same grid request through the
raw SQL backend and the SQLAlchemy ORM backend.
"""

import json
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from sqlalchemy import ForeignKey, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship
from sqlalchemy.pool import StaticPool

from grid_query import GridOrchestrator
from grid_query.config import get_settings
from grid_query.logging_config import configure_logging


class Base(DeclarativeBase):
    pass


class Author(Base):
    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    country: Mapped[str] = mapped_column(String(50))


class Book(Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200))
    year: Mapped[int]
    author_id: Mapped[Optional[int]] = mapped_column(ForeignKey("authors.id"))
    author: Mapped[Optional[Author]] = relationship()


BOOKS_SQL = """
    SELECT b.id, b.title, b.year, a.name AS author_name
    FROM books b LEFT JOIN authors a ON a.id = b.author_id
"""

SQL_COLUMNS = [
    {"dt": "title", "db": "title"},
    {"dt": "year", "db": "year"},
    {"dt": "author", "db": "author_name"},
    {"dt": "link", "db": "id", "formatter": lambda value, row: f"/books/{value}"},
]

ORM_COLUMNS = [
    {"dt": "title", "db": "title"},
    {"dt": "year", "db": "year"},
    {"dt": "author", "db": "name", "relation": "author"},
    {"dt": "link", "db": "id", "formatter": lambda value, row: f"/books/{value}"},
]

SAMPLE_REQUEST = {
    "draw": 1,
    "start": 0,
    "length": 10,
    "search": {"value": "an"},
    "order": [{"column": 1, "dir": "asc"}],
    "columns": [
        {"data": "title", "searchable": "true", "orderable": "true", "search": {"value": ""}},
        {"data": "year", "searchable": "false", "orderable": "true", "search": {"value": ""}},
        {"data": "author", "searchable": "true", "orderable": "false", "search": {"value": ""}},
        {"data": "link", "searchable": "false", "orderable": "false", "search": {"value": ""}},
    ],
}


def create_demo_engine(database_url: str = "sqlite://") -> Engine:
    """Create an engine and seed it with demo rows."""
    if database_url.startswith("sqlite") and (":memory:" in database_url or database_url == "sqlite://"):
        engine = create_engine(
            database_url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(database_url)

    Base.metadata.create_all(engine)
    with Session(engine) as session:
        if session.query(Book).count() == 0:
            tolkien = Author(name="J. R. R. Tolkien", country="UK")
            le_guin = Author(name="Ursula K. Le Guin", country="US")
            session.add_all(
                [
                    Book(title="The Hobbit", year=1937, author=tolkien),
                    Book(title="The Fellowship of the Ring", year=1954, author=tolkien),
                    Book(title="A Wizard of Earthsea", year=1968, author=le_guin),
                    Book(title="The Left Hand of Darkness", year=1969, author=le_guin),
                    Book(title="Anonymous Pamphlet", year=1800, author=None),
                ]
            )
            session.commit()
    return engine


def build_demo_grids(database_url: str = "sqlite://") -> Dict[str, object]:
    """Grid factories for the API app, one per backend."""
    engine = create_demo_engine(database_url)

    @contextmanager
    def books_sql() -> Iterator[GridOrchestrator]:
        yield GridOrchestrator.from_sql(engine, BOOKS_SQL, SQL_COLUMNS)

    @contextmanager
    def books_orm() -> Iterator[GridOrchestrator]:
        with Session(engine) as session:
            yield GridOrchestrator.from_query(session.query(Book), ORM_COLUMNS)

    return {"books_sql": books_sql, "books_orm": books_orm}


def main():
    settings = get_settings()
    configure_logging(settings.log_level)

    engine = create_demo_engine()

    print("=== Raw SQL backend ===")
    sql_grid = GridOrchestrator.from_sql(engine, BOOKS_SQL, SQL_COLUMNS, settings)
    print(json.dumps(sql_grid.process(SAMPLE_REQUEST), indent=2))

    print("\n=== ORM backend ===")
    with Session(engine) as session:
        orm_grid = GridOrchestrator.from_query(session.query(Book), ORM_COLUMNS, settings)
        print(json.dumps(orm_grid.process(SAMPLE_REQUEST), indent=2))


if __name__ == "__main__":
    main()
