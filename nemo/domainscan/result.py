"""Domain scan configuration and collected results."""

from __future__ import annotations

import ipaddress
import threading
from dataclasses import dataclass, field, fields
from typing import Any, Iterator

from nemo.db.domain import Domain, DomainAttr

RESOLVE_THREAD_NUMBER = 100
SUBFINDER_THREAD_NUMBER = 4
MASSDNS_THREAD_NUMBER = 1
CRAWLER_THREAD_NUMBER = 2


def _json(name: str, default: Any):
    return field(default=default, metadata={"json": name})


@dataclass
class DomainScanConfig:
    target: str = _json("target", "")
    org_id: int | None = _json("orgId", None)
    is_subdomain_finder: bool = _json("subfinder", False)
    is_subdomain_brute: bool = _json("subdomainBrute", False)
    is_crawler: bool = _json("crawler", False)
    is_httpx: bool = _json("httpx", False)
    is_whatweb: bool = _json("whatweb", False)
    is_ip_port_scan: bool = _json("portscan", False)
    is_ip_subnet_port_scan: bool = _json("subnetPortscan", False)
    is_screenshot: bool = _json("screenshot", False)
    is_fingerprint_hub: bool = _json("fingerprinthub", False)
    is_icon_hash: bool = _json("iconhash", False)
    port_task_mode: int = _json("portTaskMode", 0)

    def to_dict(self) -> dict:
        return {f.metadata["json"]: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "DomainScanConfig":
        config = cls()
        for f in fields(cls):
            key = f.metadata["json"]
            if key in data:
                setattr(config, f.name, data[key])
        return config


@dataclass
class DomainAttrResult:
    related_id: int = 0
    source: str = ""
    tag: str = ""
    content: str = ""


@dataclass
class DomainResult:
    org_id: int | None = None
    domain_attrs: list[DomainAttrResult] = field(default_factory=list)


def _is_ipv4_or_subnet(text: str) -> bool:
    try:
        ipaddress.IPv4Address(text)
        return True
    except ValueError:
        pass
    if "/" not in text:
        return False
    try:
        ipaddress.IPv4Network(text, strict=False)
        return True
    except ValueError:
        return False


def iter_domain_targets(target: str) -> Iterator[str]:
    """Domains named in a comma-separated target, skipping IPv4 addresses and subnets."""
    for line in target.split(","):
        domain = line.strip()
        if domain and not _is_ipv4_or_subnet(domain):
            yield domain


@dataclass
class DomainScanResult:
    """Thread-safe collection of scanned domains and their attributes."""

    domain_result: dict[str, DomainResult] | None = None
    req_response_list: list = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def has_domain(self, domain: str) -> bool:
        with self.lock:
            return self.domain_result is not None and domain in self.domain_result

    def set_domain(self, domain: str) -> None:
        with self.lock:
            if self.domain_result is None:
                self.domain_result = {}
            self.domain_result[domain] = DomainResult()

    def set_domain_attr(self, domain: str, attr: DomainAttrResult) -> None:
        """Append an attribute; the domain must have been set first."""
        with self.lock:
            if self.domain_result is None or domain not in self.domain_result:
                raise KeyError(domain)
            self.domain_result[domain].domain_attrs.append(attr)

    def save_result(self, config: DomainScanConfig) -> str:
        """Store domains and attributes in the database; report how many domains were saved."""
        saved = 0
        for name, result in (self.domain_result or {}).items():
            domain = Domain(domain_name=name, org_id=config.org_id)
            if not domain.save_or_update():
                continue
            saved += 1
            for attr in result.domain_attrs:
                DomainAttr(
                    related_id=domain.id,
                    source=attr.source,
                    tag=attr.tag,
                    content=attr.content,
                ).save_or_update()
        return f"domain:{saved}"