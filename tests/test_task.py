from datetime import datetime

import pytest

from nemo.db.connection import configure, init_schema
from nemo.db.task import Task, TaskCron

TASK_ID = "b9cd7ecc-ddb0-4160-9c41-75c55ffa212f"


@pytest.fixture(autouse=True)
def database():
    configure("sqlite://")
    init_schema()


def _add_task(task_id, **kwargs):
    task = Task(task_id=task_id, **kwargs)
    assert task.add()
    return task


def test_task_gets_by_search():
    _add_task("t1", task_name="portscan", state="SUCCESS")
    _add_task("t2", task_name="portscan", state="FAILURE")
    _add_task("t3", task_name="domainscan", state="SUCCESS")
    results, count = Task().gets({"task_name": "portscan", "state": "SUCCESS"}, -1, -1)
    assert count == 1
    assert [t.task_id for t in results] == ["t1"]


def test_task_save_or_update():
    _add_task(TASK_ID, task_name="portscan", state="STARTED", worker="w1")
    old = Task(task_id=TASK_ID)
    assert old.get_by_task_id()
    assert old.state == "STARTED"

    dt = datetime.now()
    task = Task(task_id=TASK_ID, state="FAIL", failed_time=dt)
    assert task.save_or_update() is True
    assert task.id == old.id

    new = Task(task_id=TASK_ID)
    assert new.get_by_task_id()
    assert new.state == "FAIL"
    assert new.failed_time == dt
    assert new.worker == "w1"
    assert new.task_name == "portscan"
    assert new.started_time is None


def test_task_save_or_update_inserts_new():
    task = Task(task_id="new-task", task_name="fofa")
    assert task.save_or_update() is True
    assert Task().count({}) == 1
    found = Task(id=task.id)
    assert found.get()
    assert found.task_name == "fofa"


def test_task_search_like_fields_and_cron_id():
    _add_task("a", kw_args='{"target":"10.0.0.1"}', result="ip:3", worker="worker-one",
              cron_task_id="cron-1")
    _add_task("b", kw_args='{"target":"example.com"}', result="domain:2", worker="other")
    assert Task().count({"kwargs": "10.0.0.1"}) == 1
    assert Task().count({"result": "domain"}) == 1
    assert Task().count({"worker": "one"}) == 1
    assert Task().count({"cron_id": "cron-1"}) == 1
    assert Task().count({"date_delta": 1}) == 2
    assert Task().count({"date_delta": -1}) == 2


def test_task_gets_ordered_by_update_time_and_paged():
    first = _add_task("first")
    _add_task("second")
    _add_task("third")
    assert first.update({"state": "SUCCESS"})
    results, count = Task().gets({}, 1, 2)
    assert count == 3
    assert results[0].task_id == "first"
    assert len(results) == 2


def test_task_update_and_delete():
    task = _add_task("x")
    assert task.update({"progress_message": "50%"}) is True
    found = Task(task_id="x")
    assert found.get_by_task_id()
    assert found.progress_message == "50%"
    assert task.delete() is True
    assert Task(task_id="x").get_by_task_id() is False
    assert task.delete() is False


def test_task_unknown_column_raises():
    with pytest.raises(ValueError):
        Task().count({"bogus": 1})


def test_task_cron_add_resets_run_count():
    cron = TaskCron(task_id="c1", task_name="portscan", cron_rule="*/5 * * * *", run_count=5)
    assert cron.add() is True
    assert cron.run_count == 0
    assert cron.last_run_datetime == cron.create_datetime
    found = TaskCron(id=cron.id)
    assert found.get()
    assert found.cron_rule == "*/5 * * * *"
    assert found.run_count == 0


def test_task_cron_search_and_paging():
    assert TaskCron(task_id="c1", task_name="portscan", kw_args="alpha").add()
    assert TaskCron(task_id="c2", task_name="domainscan", kw_args="beta").add()
    assert TaskCron(task_id="c3", task_name="portscan", kw_args="gamma", status="disable").add()
    assert TaskCron().count({"task_name": "port"}) == 2
    assert TaskCron().count({"kwargs": "bet"}) == 1
    assert TaskCron().count({"status": "disable"}) == 1
    results, total = TaskCron().gets({"task_name": "port"}, 1, 1)
    assert total == 2
    assert len(results) == 1


def test_task_cron_save_or_update_and_delete():
    cron = TaskCron(task_id="c1", task_name="portscan")
    assert cron.save_or_update() is True
    again = TaskCron(task_id="c1")
    assert again.save_or_update() is True
    assert again.id == cron.id
    assert TaskCron().count({}) == 1
    assert again.update({"status": "enable"})
    found = TaskCron(task_id="c1")
    assert found.get_by_task_id()
    assert found.status == "enable"
    assert found.delete() is True
    assert TaskCron(task_id="c1").get_by_task_id() is False