"""Domains and their attributes, color tags and memos."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text, select
from sqlalchemy.orm import Mapped, mapped_column

from nemo.db.connection import Base, attr_hash


class Domain(Base):
    __tablename__ = "domain"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    domain_name: Mapped[str] = mapped_column("domain", String(255), nullable=False)
    org_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def get(self) -> bool:
        return self._fetch_into(Domain.id == self.id)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        return self._insert()

    def get_by_domain(self) -> bool:
        return self._fetch_into(Domain.domain_name == self.domain_name)

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map, exact=True)

    def delete(self) -> bool:
        return self._delete_row(exact=True)

    @classmethod
    def _make_where(cls, search_map: dict) -> list:
        conditions = []
        for column, value in search_map.items():
            if column == "org_id":
                cond = cls.org_id == value
            elif column == "domain":
                cond = cls.domain_name.like(f"%{value}%")
            elif column == "ip":
                cond = cls.id.in_(
                    select(DomainAttr.related_id)
                    .distinct()
                    .where(DomainAttr.tag == "A", DomainAttr.content == value)
                )
            elif column == "color_tag":
                cond = cls.id.in_(
                    select(DomainColorTag.related_id).where(DomainColorTag.color == value)
                )
            elif column == "memo_content":
                cond = cls.id.in_(
                    select(DomainMemo.related_id).where(DomainMemo.content.like(f"%{value}%"))
                )
            elif column == "date_delta":
                cond = cls._within_days(cls.update_datetime, value)
            elif column == "create_date_delta":
                cond = cls._within_days(cls.create_datetime, value)
            elif column == "content":
                cond = cls.id.in_(
                    select(DomainAttr.related_id).where(DomainAttr.content.like(f"%{value}%"))
                )
            else:
                cond = cls._condition(column, value)
            if cond is not None:
                conditions.append(cond)
        return conditions

    def count(self, search_map: dict) -> int:
        return self._count_where(self._make_where(search_map))

    def gets(self, search_map: dict, page: int, rows_per_page: int):
        """Matching domains for one page, ordered by name, and the total count."""
        conditions = self._make_where(search_map)
        total = self._count_where(conditions)
        results = self._find_all(conditions, [Domain.domain_name], page, rows_per_page)
        return results, total

    def save_or_update(self) -> bool:
        old = Domain(domain_name=self.domain_name)
        if old.get_by_domain():
            update_map = {}
            if self.org_id:
                update_map["org_id"] = self.org_id
            self.id = old.id
            return self.update(update_map)
        return self.add()


class DomainAttr(Base):
    __tablename__ = "domain_attr"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    related_id: Mapped[int] = mapped_column("r_id", Integer, nullable=False)
    source: Mapped[str] = mapped_column(String(255), nullable=False)
    tag: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    hash: Mapped[str] = mapped_column(String(32), nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def _digest(self) -> str:
        return attr_hash(self.related_id, self.source, self.tag, self.content)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        self.hash = self._digest()
        return self._insert()

    def get_by_domain_attr(self) -> bool:
        return self._fetch_into(DomainAttr.hash == self._digest())

    def gets_by_related_id(self) -> list["DomainAttr"]:
        return self._find_all(
            [DomainAttr.related_id == self.related_id],
            [DomainAttr.tag, DomainAttr.update_datetime.desc()],
        )

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)

    def delete(self) -> bool:
        return self._delete_row()

    def delete_by_related_id_and_source(self) -> bool:
        return self._delete_where(
            DomainAttr.related_id == self.related_id, DomainAttr.source == self.source
        )

    def save_or_update(self) -> bool:
        if self.get_by_domain_attr():
            return self.update({})
        return self.add()


class DomainColorTag(Base):
    __tablename__ = "domain_color_tag"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    related_id: Mapped[int] = mapped_column("r_id", Integer, nullable=False)
    color: Mapped[str] = mapped_column(String(255), nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        return self._insert()

    def get_by_related_id(self) -> bool:
        return self._fetch_into(DomainColorTag.related_id == self.related_id)

    def delete_by_related_id(self) -> bool:
        return self._delete_where(DomainColorTag.related_id == self.related_id)

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)


class DomainMemo(Base):
    __tablename__ = "domain_memo"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    related_id: Mapped[int] = mapped_column("r_id", Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        return self._insert()

    def get_by_related_id(self) -> bool:
        return self._fetch_into(DomainMemo.related_id == self.related_id)

    def delete_by_related_id(self) -> bool:
        return self._delete_where(DomainMemo.related_id == self.related_id)

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)