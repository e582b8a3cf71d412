from dataclasses import dataclass
from datetime import datetime

import pytest

from nemo.keepalive import (
    ASYNC_FILES,
    KeepAliveInfo,
    WorkerRegistry,
    new_keep_alive_request_info,
    new_keep_alive_response_info,
    sync_custom_files,
)

HONEYPOT = "thirdparty/custom/honeypot.txt"
SERVICES = "thirdparty/custom/services-custom.txt"


@dataclass
class Status:
    worker_name: str = ""
    update_time: datetime | None = None


def _make_root(path, files=None):
    (path / "thirdparty/custom").mkdir(parents=True)
    (path / "thirdparty/icp").mkdir(parents=True)
    for name, content in (files or {}).items():
        (path / name).write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def server(tmp_path):
    return _make_root(tmp_path / "server", {HONEYPOT: "1.2.3.4 80 hfish\n", SERVICES: "8080/tcp web\n"})


@pytest.fixture
def worker(tmp_path):
    return _make_root(tmp_path / "worker", {HONEYPOT: "old\n"})


def test_request_hashes_every_file(worker):
    status = Status(worker_name="w1")
    info = new_keep_alive_request_info(status, worker)
    assert set(info.custom_files) == set(ASYNC_FILES)
    assert info.custom_files[SERVICES] == "d41d8cd98f00b204e9800998ecf8427e"
    assert info.custom_files[HONEYPOT] != info.custom_files[SERVICES]


def test_request_copies_status(worker):
    status = Status(worker_name="w1")
    info = new_keep_alive_request_info(status, worker)
    assert status.update_time is None
    assert isinstance(info.worker_status.update_time, datetime)
    assert info.worker_status.worker_name == "w1"


def test_response_sends_changed_files_and_sync_applies_them(server, worker):
    request = new_keep_alive_request_info(Status(worker_name="w1"), worker)
    response = new_keep_alive_response_info(request.custom_files, server)
    assert response == {HONEYPOT: "1.2.3.4 80 hfish\n", SERVICES: "8080/tcp web\n"}
    written = sync_custom_files(response, worker)
    assert sorted(written) == sorted([HONEYPOT, SERVICES])
    after = new_keep_alive_request_info(Status(worker_name="w1"), worker)
    server_hashes = new_keep_alive_request_info(Status(worker_name="s"), server)
    assert after.custom_files == server_hashes.custom_files
    assert new_keep_alive_response_info(after.custom_files, server) == {}


def test_response_skips_empty_hash_and_missing_server_files(server):
    request = {HONEYPOT: "", "thirdparty/icp/icp.cache": "abc"}
    assert new_keep_alive_response_info(request, server) == {}


def test_sync_ignores_empty_and_unknown_entries(worker):
    written = sync_custom_files({HONEYPOT: "", "other.txt": "data"}, worker)
    assert written == []
    assert (worker / HONEYPOT).read_text(encoding="utf-8") == "old\n"
    assert not (worker / "other.txt").exists()


def test_sync_reports_unwritable_targets(tmp_path):
    written = sync_custom_files({HONEYPOT: "content"}, tmp_path / "missing")
    assert written == []


def test_registry_rejects_nameless_worker(server):
    registry = WorkerRegistry()
    reply = registry.keep_alive(KeepAliveInfo(worker_status=Status()), server)
    assert reply == {}
    assert registry.workers == {}


def test_registry_records_worker_and_replies(server, worker):
    registry = WorkerRegistry()
    info = new_keep_alive_request_info(Status(worker_name="w1"), worker)
    reply = registry.keep_alive(info, server)
    assert set(reply) == {HONEYPOT, SERVICES}
    assert "w1" in registry.workers
    assert registry.workers["w1"].worker_name == "w1"
    assert isinstance(registry.workers["w1"].update_time, datetime)
    second = registry.keep_alive(
        new_keep_alive_request_info(Status(worker_name="w2"), server), server
    )
    assert second == {}
    assert sorted(registry.workers) == ["w1", "w2"]