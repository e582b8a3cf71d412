"""Resolve domains to IPv4 addresses and detect CDN use."""

from __future__ import annotations

import ipaddress
import socket
from concurrent.futures import ThreadPoolExecutor

from nemo.custom.cdncheck import CDNCheck
from nemo.domainscan.result import (
    RESOLVE_THREAD_NUMBER,
    DomainAttrResult,
    DomainScanConfig,
    DomainScanResult,
    iter_domain_targets,
)

SOURCE = "domainscan"


def _is_ipv4(text: str) -> bool:
    try:
        ipaddress.IPv4Address(text)
        return True
    except ValueError:
        return False


def resolve_domain(domain: str):
    """Return (cname, hosts): the CNAME is left empty, hosts are the IPv4 addresses."""
    try:
        infos = socket.getaddrinfo(domain, None)
    except (OSError, UnicodeError):
        return "", []
    hosts: list[str] = []
    for info in infos:
        address = info[4][0]
        if _is_ipv4(address) and address not in hosts:
            hosts.append(address)
    return "", hosts


class Resolve:
    """Resolve every domain of a scan, recording A, CDN and CNAME attributes."""

    def __init__(self, config=None):
        self.config = config if config is not None else DomainScanConfig()
        self.result = DomainScanResult()
        self._cdn = CDNCheck()

    def do(self) -> None:
        """Resolve domains already in the result, or else those in the target."""
        if self.result.domain_result is not None:
            domains = list(self.result.domain_result)
        else:
            self.result.domain_result = {}
            domains = list(iter_domain_targets(self.config.target))
        if not domains:
            return
        with ThreadPoolExecutor(max_workers=RESOLVE_THREAD_NUMBER) as pool:
            list(pool.map(self.run_resolve, domains))

    def run_resolve(self, domain: str) -> None:
        if not self.result.has_domain(domain):
            self.result.set_domain(domain)
        _, hosts = resolve_domain(domain)
        for host in hosts:
            self.result.set_domain_attr(
                domain, DomainAttrResult(source=SOURCE, tag="A", content=host)
            )
        is_cdn, cdn_name, cname = self._cdn.check_cname(domain)
        if is_cdn:
            self.result.set_domain_attr(
                domain, DomainAttrResult(source=SOURCE, tag="CDN", content=cdn_name)
            )
        if cname:
            self.result.set_domain_attr(
                domain, DomainAttrResult(source=SOURCE, tag="CNAME", content=cname)
            )