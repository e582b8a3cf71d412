"""Vulnerabilities found by proof-of-concept scans."""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nemo.db.connection import Base


def _vulnerability_hash(target: str, url: str, poc_file: str, source: str) -> str:
    return hashlib.md5(f"{target}{url}{poc_file}{source}".encode("utf-8")).hexdigest()


class Vulnerability(Base):
    __tablename__ = "vulnerability"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    target: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(255), nullable=False)
    poc_file: Mapped[str] = mapped_column(String(255), nullable=False)
    source: Mapped[str] = mapped_column(String(255), nullable=False)
    extra: Mapped[str] = mapped_column(Text, nullable=False)
    hash: Mapped[str] = mapped_column(String(32), nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def _digest(self) -> str:
        return _vulnerability_hash(self.target, self.url, self.poc_file, self.source)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        self.hash = self._digest()
        return self._insert()

    def get(self) -> bool:
        return self._fetch_into(Vulnerability.id == self.id)

    def get_by_vulnerability(self) -> bool:
        return self._fetch_into(Vulnerability.hash == self._digest())

    def gets_by_target(self) -> list["Vulnerability"]:
        return self._find_all(
            [Vulnerability.target == self.target], [Vulnerability.update_datetime.desc()]
        )

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)

    def delete(self) -> bool:
        return self._delete_row()

    @classmethod
    def _make_where(cls, search_map: dict) -> list:
        conditions = []
        for column, value in search_map.items():
            if column == "target":
                cond = cls.target.like(f"%{value}%")
            elif column == "poc_file":
                cond = cls.poc_file.like(f"%{value}%")
            elif column == "source":
                cond = cls.source == value
            elif column == "date_delta":
                cond = cls._within_days(cls.update_datetime, value)
            else:
                cond = cls._condition(column, value)
            if cond is not None:
                conditions.append(cond)
        return conditions

    def count(self, search_map: dict) -> int:
        return self._count_where(self._make_where(search_map))

    def gets(self, search_map: dict, page: int, rows_per_page: int):
        """Matching vulnerabilities for one page, most recently updated first, and the total."""
        conditions = self._make_where(search_map)
        total = self._count_where(conditions)
        results = self._find_all(
            conditions, [Vulnerability.update_datetime.desc()], page, rows_per_page
        )
        return results, total

    def save_or_update(self) -> bool:
        old = Vulnerability(
            target=self.target,
            url=self.url,
            poc_file=self.poc_file,
            source=self.source,
            extra=self.extra,
        )
        if old.get_by_vulnerability():
            update_map = {}
            if self.extra:
                update_map["extra"] = self.extra
            self.id = old.id
            return self.update(update_map)
        return self.add()