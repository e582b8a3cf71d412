import struct

import pytest

from nemo.custom.iplocation import IpLocation


@pytest.fixture
def root(tmp_path):
    custom = tmp_path / "thirdparty" / "custom"
    custom.mkdir(parents=True)
    (custom / "iplocation-custom.txt").write_text("# exact\n172.16.8.0/30 office\n")
    (custom / "iplocation-custom-B.txt").write_text("10.1.0.0 campus\n")
    (custom / "iplocation-custom-C.txt").write_text("192.168.120.0 lab\n")
    return tmp_path


def test_find_custom_ip(root):
    ipl = IpLocation(root)
    assert ipl.find_custom_ip("172.16.8.2") == "office"
    assert ipl.find_custom_ip("10.1.0.3") == "campus"
    assert ipl.find_custom_ip("192.168.120.220") == "lab"
    assert ipl.find_custom_ip("172.16.8.13") == ""


def test_not_ipv4(root):
    assert IpLocation(root).find_custom_ip("example") == ""


def test_c_takes_precedence_over_b(root):
    (root / "thirdparty" / "custom" / "iplocation-custom-C.txt").write_text("10.1.0.0 room\n")
    assert IpLocation(root).find_custom_ip("10.1.0.3") == "room"


def test_find_public_ip(root):
    qdir = root / "thirdparty" / "qqwry"
    qdir.mkdir(parents=True)
    body = bytearray(8)
    rec = []
    for ip, name in (("10.0.0.0", "内网"), ("11.0.0.0", "公网")):
        rec.append(len(body))
        body += struct.pack(">I", 0) + name.encode("gbk") + b"\0\0"
    start = len(body)
    for (ip, _), off in zip((("10.0.0.0", 0), ("11.0.0.0", 0)), rec):
        body += bytes(int(p) for p in ip.split("."))[::-1] + off.to_bytes(3, "little")
    struct.pack_into("<II", body, 0, start, len(body) - 7)
    (qdir / "qqwry.dat").write_bytes(bytes(body))
    assert IpLocation(root).find_public_ip("10.1.1.1") == "内网"


def test_public_ip_without_database(root, monkeypatch):
    monkeypatch.delenv("NEMO_QQWRY_URL", raising=False)
    assert IpLocation(root).find_public_ip("47.98.65.38") == ""