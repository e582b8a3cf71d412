"""IP addresses and their attributes, color tags and memos."""

from __future__ import annotations

import ipaddress
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, Integer, String, Text, or_, select
from sqlalchemy.orm import Mapped, mapped_column

from nemo.db.connection import Base, attr_hash
from nemo.db.domain import Domain, DomainAttr
from nemo.db.port import Port, PortAttr


def _ip_to_uint32(ip: str) -> int:
    try:
        return int(ipaddress.IPv4Address(ip))
    except ValueError:
        return 0


def _cidr_range(value: Any) -> tuple[int, int] | None:
    """First and last integer address of "a.b.c.d/n", counted from the address given."""
    if not isinstance(value, str) or "/" not in value:
        return None
    try:
        iface = ipaddress.IPv4Interface(value)
    except ValueError:
        return None
    start = int(iface.ip)
    return start, start + (1 << (32 - iface.network.prefixlen)) - 1


def _port_value(text: str) -> Any:
    try:
        return int(text)
    except ValueError:
        return text


class Ip(Base):
    __tablename__ = "ip"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ip_name: Mapped[str] = mapped_column("ip", String(255), nullable=False)
    ip_int: Mapped[int] = mapped_column(Integer, nullable=False)
    org_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(255), nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def get(self) -> bool:
        return self._fetch_into(Ip.id == self.id)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        self.ip_int = _ip_to_uint32(self.ip_name)
        return self._insert()

    def get_by_ip(self) -> bool:
        return self._fetch_into(Ip.ip_name == self.ip_name)

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
            elif column == "location":
                cond = cls.location.like(f"%{value}%")
            elif column == "domain":
                domain_ids = select(Domain.id).where(Domain.domain_name.like(f"%{value}%"))
                contents = select(DomainAttr.content).where(
                    DomainAttr.tag == "A", DomainAttr.related_id.in_(domain_ids)
                )
                cond = cls.ip_name.in_(contents)
            elif column == "ip":
                bounds = _cidr_range(value)
                if bounds is None:
                    cond = cls.ip_name == value
                else:
                    cond = cls.ip_int.between(*bounds)
            elif column == "port":
                ports = [_port_value(p) for p in str(value).split(",")]
                ip_ids = (
                    select(Port.ip_id)
                    .distinct()
                    .where(or_(*(Port.port_num == p for p in ports)))
                )
                cond = cls.id.in_(ip_ids)
            elif column == "port_status":
                cond = cls.id.in_(select(Port.ip_id).where(Port.status == value))
            elif column == "content":
                attr_ids = select(PortAttr.related_id).where(PortAttr.content.like(f"%{value}%"))
                cond = cls.id.in_(select(Port.ip_id).where(Port.id.in_(attr_ids)))
            elif column == "color_tag":
                cond = cls.id.in_(select(IpColorTag.related_id).where(IpColorTag.color == value))
            elif column == "memo_content":
                cond = cls.id.in_(
                    select(IpMemo.related_id).where(IpMemo.content.like(f"%{value}%"))
                )
            elif column == "date_delta":
                cond = cls._within_days(cls.update_datetime, value)
            elif column == "create_date_delta":
                within = cls._within_days(Port.create_datetime, value)
                cond = (
                    None
                    if within is None
                    else cls.id.in_(select(Port.ip_id).distinct().where(within))
                )
            else:
                cond = cls._condition(column, value)
            if cond is not None:
                conditions.append(cond)
        return conditions

    def count(self, search_map: dict) -> int:
        return self._count_where(self._make_where(search_map))

    def gets(self, search_map: dict, page: int, rows_per_page: int):
        """Matching IPs for one page, ordered by address, and the total count."""
        conditions = self._make_where(search_map)
        total = self._count_where(conditions)
        results = self._find_all(conditions, [Ip.ip_int], page, rows_per_page)
        return results, total

    def save_or_update(self) -> bool:
        old = Ip(ip_name=self.ip_name)
        if old.get_by_ip():
            update_map = {}
            if self.status:
                update_map["status"] = self.status
            if self.org_id:
                update_map["org_id"] = self.org_id
            if self.location:
                update_map["location"] = self.location
            self.id = old.id
            return self.update(update_map)
        return self.add()


class IpAttr(Base):
    __tablename__ = "ip_attr"

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

    def get(self) -> bool:
        return self._fetch_into(IpAttr.id == self.id)

    def gets(self, search_map: dict, page: int, rows_per_page: int) -> list["IpAttr"]:
        """Matching attributes ordered by tag, newest first within a tag."""
        conditions = [self._condition(column, value) for column, value in search_map.items()]
        return self._find_all(
            conditions, [IpAttr.tag, IpAttr.update_datetime.desc()], page, rows_per_page
        )

    def gets_by_related_id(self) -> list["IpAttr"]:
        return self.gets({"r_id": self.related_id}, 0, 0)

    def update(self, update_map: dict) -> bool:
        values = dict(update_map)
        values["hash"] = self._digest()
        return self._update_row(values)

    def delete(self) -> bool:
        return self._delete_row()


class IpColorTag(Base):
    __tablename__ = "ip_color_tag"

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
        return self._fetch_into(IpColorTag.related_id == self.related_id)

    def delete_by_related_id(self) -> bool:
        return self._delete_where(IpColorTag.related_id == self.related_id)

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)


class IpMemo(Base):
    __tablename__ = "ip_memo"

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
        return self._fetch_into(IpMemo.related_id == self.related_id)

    def delete_by_related_id(self) -> bool:
        return self._delete_where(IpMemo.related_id == self.related_id)

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)