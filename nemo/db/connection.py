"""Database engine, sessions and the declarative base shared by all tables."""

from __future__ import annotations

import hashlib
import itertools
import time
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Iterator

from sqlalchemy import Integer, String, create_engine, func, inspect, select, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import DeclarativeBase, Session
from sqlalchemy.pool import StaticPool

from nemo.conf import Database, global_server_config
from nemo.logs import get_runtime_logger

RETRIED_NUMBER = 5
RETRIED_SLEEP_SECONDS = 5

_engine: Engine | None = None
_bind_names = itertools.count()


class Base(DeclarativeBase):
    """Declarative base with the record helpers every table uses."""

    def __init__(self, **kwargs: Any) -> None:
        cls = type(self)
        for prop in inspect(cls).column_attrs:
            column = prop.columns[0]
            if prop.key in kwargs or column.primary_key or column.nullable:
                continue
            if isinstance(column.type, String):
                kwargs[prop.key] = ""
            elif isinstance(column.type, Integer):
                kwargs[prop.key] = 0
        for key, value in kwargs.items():
            if not hasattr(cls, key):
                raise TypeError(f"{key!r} is not a field of {cls.__name__}")
            setattr(self, key, value)

    @classmethod
    def _attribute_keys(cls) -> dict[str, str]:
        return {prop.columns[0].name: prop.key for prop in inspect(cls).column_attrs}

    def _copy_from(self, other: "Base") -> None:
        for prop in inspect(type(self)).column_attrs:
            setattr(self, prop.key, getattr(other, prop.key))

    def _fetch_into(self, *conditions) -> bool:
        cls = type(self)
        stmt = select(cls).where(*conditions).order_by(cls.__table__.c.id).limit(1)
        with session_scope() as session:
            row = session.scalars(stmt).first()
            if row is None:
                return False
            self._copy_from(row)
        return True

    def _insert(self) -> bool:
        with session_scope() as session:
            session.add(self)
            session.flush()
        return self.__table__.c.id is not None and getattr(self, "id") is not None

    def _update_row(self, update_map: dict, *, exact: bool = False) -> bool:
        values = dict(update_map)
        values["update_datetime"] = datetime.now()
        table = self.__table__
        with session_scope() as session:
            result = session.execute(
                table.update().where(table.c.id == getattr(self, "id")).values(values)
            )
            affected = result.rowcount
        if affected > 0:
            keys = self._attribute_keys()
            for name, value in values.items():
                setattr(self, keys[name], value)
        return affected == 1 if exact else affected > 0

    def _delete_row(self, *, exact: bool = False) -> bool:
        table = self.__table__
        return self._delete_where(table.c.id == getattr(self, "id"), exact=exact)

    @classmethod
    def _delete_where(cls, *conditions, exact: bool = False) -> bool:
        table = cls.__table__
        with session_scope() as session:
            affected = session.execute(table.delete().where(*conditions)).rowcount
        return affected == 1 if exact else affected > 0

    @classmethod
    def _condition(cls, column: str, value: Any):
        """An expression with one "?" placeholder, or equality on a column name."""
        if "?" in column:
            if column.count("?") != 1:
                raise ValueError(f"expected exactly one placeholder in {column!r}")
            name = f"cond_{next(_bind_names)}"
            return text(column.replace("?", f":{name}")).bindparams(**{name: value})
        table = cls.__table__
        if column not in table.c:
            raise ValueError(f"unknown column {column!r} for table {table.name}")
        return table.c[column] == value

    @staticmethod
    def _within_days(column, days: int):
        if days < 0:
            return None
        now = datetime.now()
        return column.between(now - timedelta(days=days), now)

    @classmethod
    def _count_where(cls, conditions) -> int:
        stmt = select(func.count()).select_from(cls.__table__).where(*conditions)
        with session_scope() as session:
            return session.scalar(stmt) or 0

    @classmethod
    def _find_all(cls, conditions, order_by, page: int = 0, rows_per_page: int = 0) -> list:
        stmt = select(cls).where(*conditions).order_by(*order_by)
        if rows_per_page > 0 and page > 0:
            stmt = stmt.offset((page - 1) * rows_per_page).limit(rows_per_page)
        with session_scope() as session:
            return list(session.scalars(stmt))


def build_dsn(database: Database) -> str:
    """MySQL connection URL for the configured database."""
    url = URL.create(
        "mysql+pymysql",
        username=database.username,
        password=database.password,
        host=database.host,
        port=database.port,
        database=database.dbname,
        query={"charset": "utf8mb4"},
    )
    return url.render_as_string(hide_password=False)


def configure(url: str) -> Engine:
    """Use the database at ``url`` for all following operations."""
    global _engine
    parsed = make_url(url)
    options: dict[str, Any] = {}
    if parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:"):
        options = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(url, **options)
    return _engine


def get_engine() -> Engine:
    """The shared engine, connecting to the configured server with retries."""
    global _engine
    if _engine is None:
        engine = create_engine(build_dsn(global_server_config().database), pool_pre_ping=True)
        for attempt in range(RETRIED_NUMBER + 1):
            try:
                with engine.connect():
                    break
            except OperationalError as exc:
                get_runtime_logger().error("connect to database fail,retry...")
                if attempt == RETRIED_NUMBER:
                    raise ConnectionError("failed to connect database") from exc
                time.sleep(RETRIED_SLEEP_SECONDS)
        _engine = engine
    return _engine


@contextmanager
def session_scope() -> Iterator[Session]:
    """A session that commits on success and rolls back on error."""
    session = Session(get_engine(), expire_on_commit=False)
    try:
        yield session
        session.commit()
    except BaseException:
        session.rollback()
        raise
    finally:
        session.close()


def init_schema() -> None:
    """Create every table known to the declarative base."""
    Base.metadata.create_all(get_engine())


def attr_hash(related_id: int, source: str, tag: str, content: str) -> str:
    """MD5 hex digest identifying an attribute record."""
    return hashlib.md5(f"{related_id}{source}{tag}{content}".encode("utf-8")).hexdigest()