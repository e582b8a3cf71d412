"""Executed tasks and scheduled (cron) tasks."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from nemo.db.connection import Base

_TIME_FIELDS = (
    ("received_time", "received"),
    ("retried_time", "retried"),
    ("revoked_time", "revoked"),
    ("started_time", "started"),
    ("succeeded_time", "succeeded"),
    ("failed_time", "failed"),
)


class Task(Base):
    __tablename__ = "task"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[str] = mapped_column(String(255), nullable=False)
    task_name: Mapped[str] = mapped_column(String(255), nullable=False)
    args: Mapped[str] = mapped_column(Text, nullable=False)
    kw_args: Mapped[str] = mapped_column("kwargs", Text, nullable=False)
    worker: Mapped[str] = mapped_column(String(255), nullable=False)
    state: Mapped[str] = mapped_column(String(255), nullable=False)
    result: Mapped[str] = mapped_column(Text, nullable=False)
    received_time: Mapped[Optional[datetime]] = mapped_column("received", DateTime, nullable=True)
    retried_time: Mapped[Optional[datetime]] = mapped_column("retried", DateTime, nullable=True)
    revoked_time: Mapped[Optional[datetime]] = mapped_column("revoked", DateTime, nullable=True)
    started_time: Mapped[Optional[datetime]] = mapped_column("started", DateTime, nullable=True)
    succeeded_time: Mapped[Optional[datetime]] = mapped_column(
        "succeeded", DateTime, nullable=True
    )
    failed_time: Mapped[Optional[datetime]] = mapped_column("failed", DateTime, nullable=True)
    progress_message: Mapped[str] = mapped_column(Text, nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cron_task_id: Mapped[str] = mapped_column("cron_id", String(255), nullable=False)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        return self._insert()

    def get(self) -> bool:
        return self._fetch_into(Task.id == self.id)

    def get_by_task_id(self) -> bool:
        return self._fetch_into(Task.task_id == self.task_id)

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)

    def delete(self) -> bool:
        return self._delete_row()

    @classmethod
    def _make_where(cls, search_map: dict) -> list:
        conditions = []
        for column, value in search_map.items():
            if column == "task_name":
                cond = cls.task_name.like(f"%{value}%")
            elif column == "kwargs":
                cond = cls.kw_args.like(f"%{value}%")
            elif column == "result":
                cond = cls.result.like(f"%{value}%")
            elif column == "state":
                cond = cls.state == value
            elif column == "worker":
                cond = cls.worker.like(f"%{value}%")
            elif column == "date_delta":
                cond = cls._within_days(cls.update_datetime, value)
            elif column == "cron_id":
                cond = cls.cron_task_id == value
            else:
                cond = cls._condition(column, value)
            if cond is not None:
                conditions.append(cond)
        return conditions

    def count(self, search_map: dict) -> int:
        return self._count_where(self._make_where(search_map))

    def gets(self, search_map: dict, page: int, rows_per_page: int):
        """Matching tasks for one page, most recently updated first, and the total."""
        conditions = self._make_where(search_map)
        total = self._count_where(conditions)
        results = self._find_all(
            conditions, [Task.update_datetime.desc()], page, rows_per_page
        )
        return results, total

    def save_or_update(self) -> bool:
        old = Task(task_id=self.task_id)
        if old.get_by_task_id():
            update_map = {}
            if self.worker:
                update_map["worker"] = self.worker
            if self.state:
                update_map["state"] = self.state
            if self.result:
                update_map["result"] = self.result
            for attribute, column in _TIME_FIELDS:
                value = getattr(self, attribute)
                if value is not None:
                    update_map[column] = value
            if self.progress_message:
                update_map["progress_message"] = self.progress_message
            self.id = old.id
            return self.update(update_map)
        return self.add()


class TaskCron(Base):
    __tablename__ = "task_cron"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    task_id: Mapped[str] = mapped_column(String(255), nullable=False)
    task_name: Mapped[str] = mapped_column(String(255), nullable=False)
    args: Mapped[str] = mapped_column(Text, nullable=False)
    kw_args: Mapped[str] = mapped_column("kwargs", Text, nullable=False)
    create_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    update_datetime: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    cron_rule: Mapped[str] = mapped_column(String(255), nullable=False)
    last_run_datetime: Mapped[Optional[datetime]] = mapped_column(
        "lastrun_datetime", DateTime, nullable=True
    )
    status: Mapped[str] = mapped_column(String(255), nullable=False)
    run_count: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)

    def add(self) -> bool:
        now = datetime.now()
        self.create_datetime = now
        self.update_datetime = now
        self.last_run_datetime = now
        self.run_count = 0
        return self._insert()

    def get(self) -> bool:
        return self._fetch_into(TaskCron.id == self.id)

    def get_by_task_id(self) -> bool:
        return self._fetch_into(TaskCron.task_id == self.task_id)

    def update(self, update_map: dict) -> bool:
        return self._update_row(update_map)

    def delete(self) -> bool:
        return self._delete_row()

    @classmethod
    def _make_where(cls, search_map: dict) -> list:
        conditions = []
        for column, value in search_map.items():
            if column == "task_name":
                conditions.append(cls.task_name.like(f"%{value}%"))
            elif column == "kwargs":
                conditions.append(cls.kw_args.like(f"%{value}%"))
            else:
                conditions.append(cls._condition(column, value))
        return conditions

    def count(self, search_map: dict) -> int:
        return self._count_where(self._make_where(search_map))

    def gets(self, search_map: dict, page: int, rows_per_page: int):
        """Matching cron tasks for one page, most recently updated first, and the total."""
        conditions = self._make_where(search_map)
        total = self._count_where(conditions)
        results = self._find_all(
            conditions, [TaskCron.update_datetime.desc()], page, rows_per_page
        )
        return results, total

    def save_or_update(self) -> bool:
        old = TaskCron(task_id=self.task_id)
        if old.get_by_task_id():
            self.id = old.id
            return self.update({})
        return self.add()