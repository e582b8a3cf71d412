"""Port number to service name lookup."""

from __future__ import annotations

from pathlib import Path

from nemo.conf import get_root_path
from nemo.custom.iplocation import IpLocation
from nemo.logs import get_runtime_logger

UNKNOWN_SERVICE = "unknown"


def _lines(path: Path):
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        get_runtime_logger().error(str(exc))
        return
    for line in content.split("\n"):
        txt = line.strip()
        if txt and not txt.startswith("#"):
            yield txt


class PortService:
    """Service names from nmap-services and a custom override file."""

    def __init__(self, root=None, ip_location=None):
        base = Path(root if root is not None else get_root_path())
        self.ip_location = ip_location if ip_location is not None else IpLocation(base)
        self.nmap_services: dict[str, str] = {}
        self.custom_services: dict[str, str] = {}
        for txt in _lines(base / "thirdparty" / "nmap" / "nmap-services"):
            parts = txt.split("\t")
            if len(parts) >= 3:
                self.nmap_services[parts[1]] = parts[0]
        for txt in _lines(base / "thirdparty" / "custom" / "services-custom.txt"):
            parts = txt.split(" ")
            if len(parts) >= 2:
                self.custom_services[parts[0].strip()] = parts[1].strip()

    def find_service(self, port_number: int, ip: str = "") -> str:
        """Custom services apply to IPs with a custom location; then nmap's list."""
        key = f"{port_number}/tcp"
        if ip and self.ip_location.find_custom_ip(ip):
            name = self.custom_services.get(key)
            if name:
                return name
        return self.nmap_services.get(key) or UNKNOWN_SERVICE