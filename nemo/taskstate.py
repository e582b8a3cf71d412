"""Task states, worker status and message-queue connection settings."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from datetime import datetime

from nemo.conf import global_server_config, global_worker_config

DEFAULT_QUEUE = "machinery_tasks"
EXCHANGE = "machinery_exchange"
EXCHANGE_TYPE = "direct"
BINDING_KEY = "machinery_task"
PREFETCH_COUNT = 3
RESULTS_EXPIRE_IN = 3600


class TaskState(str, enum.Enum):
    CREATED = "CREATED"
    REVOKED = "REVOKED"
    STARTED = "STARTED"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    RECEIVED = "RECEIVED"
    PENDING = "PENDING"
    RETRY = "RETRY"


@dataclass
class TaskResult:
    status: str = ""
    msg: str = ""

    def to_dict(self) -> dict:
        return {"status": self.status, "msg": self.msg}

    @classmethod
    def from_dict(cls, data: dict) -> "TaskResult":
        return cls(status=data.get("status", ""), msg=data.get("msg", ""))


@dataclass
class WorkerStatus:
    worker_name: str = ""
    create_time: datetime = field(default_factory=datetime.now)
    update_time: datetime = field(default_factory=datetime.now)
    task_executed_number: int = 0
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def to_dict(self) -> dict:
        return {
            "worker_name": self.worker_name,
            "create_time": self.create_time.isoformat(),
            "update_time": self.update_time.isoformat(),
            "task_number": self.task_executed_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkerStatus":
        return cls(
            worker_name=data.get("worker_name", ""),
            create_time=datetime.fromisoformat(data["create_time"]),
            update_time=datetime.fromisoformat(data["update_time"]),
            task_executed_number=data.get("task_number", 0),
        )


def amqp_url(username: str, password: str, host: str, port: int) -> str:
    """Build the AMQP broker URL."""
    return f"amqp://{username}:{password}@{host}:{port}/"


def server_amqp_url() -> str:
    mq = global_server_config().rabbitmq
    return amqp_url(mq.username, mq.password, mq.host, mq.port)


def worker_amqp_url() -> str:
    mq = global_worker_config().rabbitmq
    return amqp_url(mq.username, mq.password, mq.host, mq.port)