"""Worker heartbeat data and the synchronisation of custom data files."""

from __future__ import annotations

import copy
import hashlib
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from nemo.conf import get_root_path
from nemo.logs import get_runtime_logger

# Custom data files kept in step between server and workers.
ASYNC_FILES = (
    "thirdparty/custom/honeypot.txt",
    "thirdparty/custom/iplocation-custom.txt",
    "thirdparty/custom/iplocation-custom-B.txt",
    "thirdparty/custom/iplocation-custom-C.txt",
    "thirdparty/custom/services-custom.txt",
    "thirdparty/icp/icp.cache",
)

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


@dataclass
class KeepAliveInfo:
    """What a worker sends: its status and the hashes of its custom files."""

    worker_status: Any
    custom_files: dict[str, str] = field(default_factory=dict)


def _root(root) -> Path:
    return Path(root if root is not None else get_root_path())


def _read(path: Path) -> bytes | None:
    try:
        return path.read_bytes()
    except OSError:
        return None


def _md5(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


def new_keep_alive_request_info(worker_status, root=None) -> KeepAliveInfo:
    """Heartbeat request: a copy of the status, stamped now, and each file's MD5."""
    status = copy.copy(worker_status)
    status.update_time = datetime.now()
    base = _root(root)
    hashes = {}
    for name in ASYNC_FILES:
        content = _read(base / name)
        hashes[name] = _md5(content or b"")
    return KeepAliveInfo(worker_status=status, custom_files=hashes)


def new_keep_alive_response_info(request: dict, root=None) -> dict[str, str]:
    """Contents of the server's files whose hash differs from the worker's."""
    base = _root(root)
    changed = {}
    for name in ASYNC_FILES:
        worker_hash = request.get(name, "")
        if not worker_hash:
            continue
        content = _read(base / name)
        if not content:
            get_runtime_logger().error("load custom file %s fail", name)
            continue
        if _md5(content) == worker_hash:
            continue
        changed[name] = content.decode(_ENCODING, _ERRORS)
    return changed


def sync_custom_files(files: dict, root=None) -> list[str]:
    """Write received file contents under the root; return the names written."""
    base = _root(root)
    written = []
    for name in ASYNC_FILES:
        content = files.get(name, "")
        if not content:
            continue
        try:
            (base / name).write_bytes(content.encode(_ENCODING, _ERRORS))
        except OSError as exc:
            get_runtime_logger().error(str(exc))
            continue
        written.append(name)
    return written


class WorkerRegistry:
    """Latest status of every worker that has sent a heartbeat."""

    def __init__(self):
        self.workers: dict[str, Any] = {}
        self._lock = threading.Lock()

    def keep_alive(self, info: KeepAliveInfo, root=None) -> dict[str, str]:
        """Record a heartbeat and return the custom files the worker must update."""
        name = getattr(info.worker_status, "worker_name", "")
        if not name:
            get_runtime_logger().error("no worker name")
            return {}
        with self._lock:
            info.worker_status.update_time = datetime.now()
            self.workers[name] = info.worker_status
        return new_keep_alive_response_info(info.custom_files, root)