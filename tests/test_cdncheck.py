from types import SimpleNamespace
from unittest.mock import patch

import dns.resolver
import pytest

from nemo.custom.cdncheck import CDNCheck


@pytest.fixture(scope="module")
def checker():
    return CDNCheck()


@pytest.mark.parametrize(
    "ip, expected",
    [
        ("114.114.114.114", False),
        ("125.39.46.3", True),
        ("14.215.177.39", False),
        ("173.245.48.12", True),
        ("119.84.174.52", False),
        ("116.55.250.136", True),
    ],
)
def test_check_ip(checker, ip, expected):
    assert checker.check_ip(ip) is expected


def test_check_ip_invalid_address(checker):
    assert checker.check_ip("not-an-ip") is False


def test_check_ip_ipv6_is_not_cdn(checker):
    assert checker.check_ip("::1") is False


def test_match_cname_akamai(checker):
    assert checker.match_cname("www.example.com", "www.example.com.akamaiedge.net.") == (
        True,
        "akamai",
        "www.example.com.akamaiedge.net",
    )


def test_match_cname_amazonaws(checker):
    assert checker.match_cname("www.example.com", "s3.amazonaws.com") == (
        True,
        "amazonaws.com",
        "s3.amazonaws.com",
    )


def test_match_cname_not_cdn(checker):
    assert checker.match_cname("www.example.com", "host.example.org.") == (
        False,
        "",
        "host.example.org",
    )


def test_match_cname_same_as_domain(checker):
    assert checker.match_cname("www.example.com", "www.example.com.") == (False, "", "")


def test_match_cname_empty(checker):
    assert checker.match_cname("www.example.com", "") == (False, "", "")


def _answer(name):
    return SimpleNamespace(canonical_name=SimpleNamespace(to_text=lambda: name))


def test_check_cname_uses_resolver(checker):
    with patch("dns.resolver.resolve", return_value=_answer("edge.cdn.cloudflare.net.")):
        is_cdn, cdn_name, cname = checker.check_cname("www.example.com")
    assert is_cdn is True
    assert cdn_name == "cloudflare.net"
    assert cname == "edge.cdn.cloudflare.net"


def test_check_cname_lookup_failure(checker):
    with patch("dns.resolver.resolve", side_effect=dns.resolver.NXDOMAIN()):
        assert checker.check_cname("missing.example.com") == (False, "", "")