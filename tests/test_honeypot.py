import pytest

from nemo.custom.honeypot import HoneyPot

TEXT = """# comment
1.2.3.4 22,80 HFish
5.6.7.8 - Glastopf
bad line
"""


@pytest.fixture
def hp(tmp_path):
    f = tmp_path / "honeypot.txt"
    f.write_text(TEXT)
    return HoneyPot(f)


def test_unknown_host(hp):
    assert hp.check_honeypot("9.9.9.9", "22") == (False, None)


def test_host_without_ports(hp):
    assert hp.check_honeypot("5.6.7.8", "80") == (True, ["5.6.7.8/Glastopf"])


def test_empty_ports_matches_host(hp):
    assert hp.check_honeypot("1.2.3.4", "") == (True, ["1.2.3.4/HFish"])


def test_port_match(hp):
    ok, systems = hp.check_honeypot("1.2.3.4", "80,443,x")
    assert ok
    assert systems == [f"1.2.3.4:{80}/HFish"]


def test_port_miss(hp):
    assert hp.check_honeypot("1.2.3.4", "443") == (False, None)


def test_missing_file(tmp_path):
    hp = HoneyPot(tmp_path / "none.txt")
    assert hp.honeypots == {}