"""
Shared pytest fixtures: in-memory SQLite stores and ORM models.
"""

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import ForeignKey, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship
from sqlalchemy.pool import StaticPool

from grid_query.config import GridSettings


class Base(DeclarativeBase):
    pass


class Person(Base):
    __tablename__ = "people"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    age: Mapped[int]


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(50))


class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(50))
    salary: Mapped[int]
    department_id: Mapped[Optional[int]] = mapped_column(ForeignKey("departments.id"))
    department: Mapped[Optional[Department]] = relationship()


class RecordingStore:
    """Store double that records statements and serves canned rows."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, filtered: int = 0, total: int = 0):
        self.rows = rows or []
        self.filtered = filtered
        self.total = total
        self.statements: List[tuple] = []
        self.snapshots = 0

    def execute(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        self.statements.append((sql, dict(params or {})))
        if "AS filtered_count" in sql:
            return [{"filtered_count": self.filtered}]
        if "AS total_count" in sql:
            return [{"total_count": self.total}]
        return list(self.rows)

    def quote(self, identifier: str) -> str:
        return f'"{identifier}"'

    def as_text(self, expression: str) -> str:
        return f"CAST({expression} AS TEXT)"

    @contextmanager
    def snapshot(self):
        self.snapshots += 1
        yield self


def _memory_engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def settings():
    return GridSettings()


@pytest.fixture
def engine():
    """People table holding Bob (40), Ann (25) and Cy (30)."""
    engine = _memory_engine()
    with Session(engine) as session:
        session.add_all(
            [
                Person(name="Bob", age=40),
                Person(name="Ann", age=25),
                Person(name="Cy", age=30),
            ]
        )
        session.commit()
    yield engine
    engine.dispose()


@pytest.fixture
def numbered_engine():
    """People table holding P01..P20 with ages 1..20."""
    engine = _memory_engine()
    with Session(engine) as session:
        session.add_all([Person(name=f"P{i:02d}", age=i) for i in range(1, 21)])
        session.commit()
    yield engine
    engine.dispose()


@pytest.fixture
def staff_session():
    """Employees with a many-to-one department; Dan has no department."""
    engine = _memory_engine()
    with Session(engine) as session:
        engineering = Department(title="Engineering")
        sales = Department(title="Sales")
        session.add_all(
            [
                Employee(name="Alice", salary=100, department=engineering),
                Employee(name="Bob", salary=80, department=sales),
                Employee(name="Carol", salary=120, department=engineering),
                Employee(name="Dan", salary=60, department=None),
            ]
        )
        session.commit()

    session = Session(engine)
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def recording_store():
    return RecordingStore


@pytest.fixture
def make_payload():
    """Build a raw grid payload for the given output keys."""

    def _make(
        keys,
        start=0,
        length=10,
        search="",
        order=None,
        column_search=None,
        unsearchable=(),
        unorderable=(),
        draw=1,
    ):
        column_search = column_search or {}
        return {
            "draw": draw,
            "start": start,
            "length": length,
            "search": {"value": search},
            "order": [{"column": index, "dir": direction} for index, direction in (order or [])],
            "columns": [
                {
                    "data": key,
                    "searchable": "false" if key in unsearchable else "true",
                    "orderable": "false" if key in unorderable else "true",
                    "search": {"value": column_search.get(key, "")},
                }
                for key in keys
            ],
        }

    return _make
