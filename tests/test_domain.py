import pytest

from nemo.db.connection import configure, init_schema
from nemo.db.domain import Domain, DomainAttr, DomainColorTag, DomainMemo


@pytest.fixture(autouse=True)
def database():
    configure("sqlite://")
    init_schema()


def _add(name, org_id=None):
    domain = Domain(domain_name=name, org_id=org_id)
    assert domain.add() is True
    return domain


def test_domain_add():
    domain = Domain(domain_name="10086.cn", org_id=None)
    assert domain.add() is True
    assert domain.id is not None
    assert domain.create_datetime is not None
    found = Domain(domain_name="10086.cn")
    assert found.get_by_domain() is True
    assert found.id == domain.id


def test_domain_gets_by_search():
    for name in ("www.10086.cn", "example.com", "10086.cn"):
        _add(name)
    results, total = Domain().gets({"domain": "10086"}, 1, 10)
    assert [d.domain_name for d in results] == ["10086.cn", "www.10086.cn"]
    assert total == 2


def test_domain_gets_pagination():
    for name in ("e.com", "a.com", "c.com", "b.com", "d.com"):
        _add(name)
    results, total = Domain().gets({}, 2, 2)
    assert [d.domain_name for d in results] == ["c.com", "d.com"]
    assert total == 5


def test_domain_search_org_id():
    _add("a.com", 1)
    _add("b.com", 2)
    results, total = Domain().gets({"org_id": 2}, 0, 0)
    assert [d.domain_name for d in results] == ["b.com"]
    assert total == 1


def test_domain_search_ip_and_content():
    target = _add("a.com")
    _add("b.com")
    DomainAttr(related_id=target.id, source="domainscan", tag="A", content="1.2.3.4").add()
    results, _ = Domain().gets({"ip": "1.2.3.4"}, 0, 0)
    assert [d.domain_name for d in results] == ["a.com"]
    assert Domain().count({"content": "2.3"}) == 1
    assert Domain().count({"ip": "9.9.9.9"}) == 0


def test_domain_search_color_tag_and_memo():
    tagged = _add("a.com")
    memo = _add("b.com")
    DomainColorTag(related_id=tagged.id, color="red").add()
    DomainMemo(related_id=memo.id, content="owned by ops").add()
    assert [d.domain_name for d in Domain().gets({"color_tag": "red"}, 0, 0)[0]] == ["a.com"]
    assert [d.domain_name for d in Domain().gets({"memo_content": "ops"}, 0, 0)[0]] == ["b.com"]


def test_domain_search_date_delta():
    _add("a.com")
    assert Domain().count({"date_delta": 1}) == 1
    assert Domain().count({"create_date_delta": 1}) == 1
    assert Domain().count({"date_delta": -1}) == 1


def test_domain_search_unknown_column():
    with pytest.raises(ValueError):
        Domain().count({"nope": 1})


def test_domain_get_update_delete():
    domain = _add("a.com")
    target = Domain(id=domain.id)
    assert target.update({"org_id": 7}) is True
    loaded = Domain(id=domain.id)
    assert loaded.get() is True
    assert loaded.org_id == 7
    assert loaded.domain_name == "a.com"
    assert loaded.delete() is True
    assert Domain(id=domain.id).get() is False


def test_domain_save_or_update():
    domain = _add("a.com")
    again = Domain(domain_name="a.com", org_id=3)
    assert again.save_or_update() is True
    assert again.id == domain.id
    assert Domain(domain_name="a.com", org_id=0).save_or_update() is True
    loaded = Domain(id=domain.id)
    loaded.get()
    assert loaded.org_id == 3
    assert Domain().count({}) == 1
    assert Domain(domain_name="b.com").save_or_update() is True
    assert Domain().count({}) == 2


def test_domain_attr_gets_by_related_id():
    for tag in ("CNAME", "A", "CDN"):
        DomainAttr(related_id=4175, source="domainscan", tag=tag, content="x").add()
    DomainAttr(related_id=1, source="domainscan", tag="A", content="y").add()
    attrs = DomainAttr(related_id=4175).gets_by_related_id()
    assert [a.tag for a in attrs] == ["A", "CDN", "CNAME"]


def test_domain_attr_save_or_update_and_lookup():
    attr = DomainAttr(related_id=2, source="domainscan", tag="A", content="1.1.1.1")
    assert attr.save_or_update() is True
    same = DomainAttr(related_id=2, source="domainscan", tag="A", content="1.1.1.1")
    assert same.save_or_update() is True
    assert same.id == attr.id
    assert len(DomainAttr(related_id=2).gets_by_related_id()) == 1


def test_domain_attr_delete_by_related_id_and_source():
    DomainAttr(related_id=2, source="fofa", tag="title", content="a").add()
    DomainAttr(related_id=2, source="fofa", tag="server", content="b").add()
    keep = DomainAttr(related_id=2, source="domainscan", tag="A", content="c")
    keep.add()
    assert DomainAttr(related_id=2, source="fofa").delete_by_related_id_and_source() is True
    assert [a.id for a in DomainAttr(related_id=2).gets_by_related_id()] == [keep.id]
    assert keep.delete() is True
    assert keep.delete() is False


def test_domain_color_tag_lifecycle():
    assert DomainColorTag(related_id=3, color="red").add() is True
    found = DomainColorTag(related_id=3)
    assert found.get_by_related_id() is True
    assert found.color == "red"
    assert found.update({"color": "blue"}) is True
    reloaded = DomainColorTag(related_id=3)
    reloaded.get_by_related_id()
    assert reloaded.color == "blue"
    assert DomainColorTag(related_id=3).delete_by_related_id() is True
    assert DomainColorTag(related_id=3).get_by_related_id() is False


def test_domain_memo_lifecycle():
    assert DomainMemo(related_id=4, content="note").add() is True
    found = DomainMemo(related_id=4)
    assert found.get_by_related_id() is True
    assert found.content == "note"
    assert found.update({"content": "changed"}) is True
    assert found.content == "changed"
    assert DomainMemo(related_id=4).delete_by_related_id() is True
    assert DomainMemo(related_id=4).delete_by_related_id() is False