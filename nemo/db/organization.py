"""Organizations that assets belong to."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from nemo.db.connection import Base


class Organization(Base):
    __tablename__ = "organization"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    org_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(255), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def get(self) -> bool:
        return self._fetch_into(Organization.id == self.id)

    @classmethod
    def _make_where(cls, search_map: dict) -> list:
        return [cls._condition(column, value) for column, value in search_map.items()]

    def gets(self, search_map: dict, page: int, rows_per_page: int) -> list["Organization"]:
        """Matching organizations, by descending sort order then name."""
        return self._find_all(
            self._make_where(search_map),
            [Organization.sort_order.desc(), Organization.org_name],
            page,
            rows_per_page,
        )

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        return self._insert()

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map, exact=True)

    def delete(self) -> bool:
        return self._delete_row(exact=True)

    def count(self, search_map: dict) -> int:
        return self._count_where(self._make_where(search_map))