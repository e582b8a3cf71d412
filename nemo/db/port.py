"""Open ports and their attributes."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nemo.db.connection import Base, attr_hash


class Port(Base):
    __tablename__ = "port"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    ip_id: Mapped[int] = mapped_column(Integer, nullable=False)
    port_num: Mapped[int] = mapped_column("port", Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(255), nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        return self._insert()

    def get_by_ip_port(self) -> bool:
        return self._fetch_into(Port.ip_id == self.ip_id, Port.port_num == self.port_num)

    def gets_by_ip_id(self) -> list["Port"]:
        return self._find_all([Port.ip_id == self.ip_id], [Port.port_num])

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)

    def save_or_update(self) -> bool:
        old = Port(ip_id=self.ip_id, port_num=self.port_num)
        if old.get_by_ip_port():
            update_map = {}
            if self.status:
                update_map["status"] = self.status
            self.id = old.id
            return self.update(update_map)
        return self.add()


class PortAttr(Base):
    __tablename__ = "port_attr"

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

    def get_by_port_attr(self) -> bool:
        return self._fetch_into(PortAttr.hash == self._digest())

    def gets_by_related_id(self) -> list["PortAttr"]:
        return self._find_all(
            [PortAttr.related_id == self.related_id],
            [PortAttr.tag, PortAttr.update_datetime.desc()],
        )

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)

    def delete(self) -> bool:
        return self._delete_row()

    def save_or_update(self) -> bool:
        if self.get_by_port_attr():
            return self.update({})
        return self.add()