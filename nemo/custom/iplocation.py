"""IP geolocation from custom lists and the QQwry database."""

from __future__ import annotations

import ipaddress
from pathlib import Path

from nemo.conf import get_root_path
from nemo.custom.qqwry import QQwry, fetch_online
from nemo.logs import get_runtime_logger


def _expand_ips(text: str) -> list[str]:
    try:
        return [str(ipaddress.IPv4Address(text))]
    except ValueError:
        pass
    try:
        return [str(a) for a in ipaddress.IPv4Network(text, strict=False)]
    except ValueError:
        return []


def _entries(path: Path):
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        get_runtime_logger().error(str(exc))
        return
    for line in content.split("\n"):
        txt = line.strip()
        if not txt or txt.startswith("#"):
            continue
        parts = txt.split(" ")
        if len(parts) >= 2:
            yield parts[0], parts[1]


class IpLocation:
    """Resolve IP locations from custom files and the public database."""

    def __init__(self, root=None):
        self.root = Path(root if root is not None else get_root_path())
        self.custom: dict[str, str] = {}
        self.custom_b: dict[str, str] = {}
        self.custom_c: dict[str, str] = {}
        self._qqwry: QQwry | None = None
        self._qqwry_loaded = False
        self.load_custom_ip()

    def load_custom_ip(self) -> None:
        """Load the exact, class-B and class-C custom location files."""
        base = self.root / "thirdparty" / "custom"
        for ip, loc in _entries(base / "iplocation-custom-B.txt"):
            parts = ip.split(".")
            if len(parts) == 4:
                self.custom_b[".".join([parts[0], parts[1], "0", "0"])] = loc
        for ip, loc in _entries(base / "iplocation-custom-C.txt"):
            parts = ip.split(".")
            if len(parts) == 4:
                self.custom_c[".".join([parts[0], parts[1], parts[2], "0"])] = loc
        for ip, loc in _entries(base / "iplocation-custom.txt"):
            for one in _expand_ips(ip):
                self.custom[one] = loc

    def find_custom_ip(self, ip: str) -> str:
        if ip in self.custom:
            return self.custom[ip]
        parts = ip.split(".")
        if len(parts) != 4:
            return ""
        c_key = ".".join([parts[0], parts[1], parts[2], "0"])
        if c_key in self.custom_c:
            return self.custom_c[c_key]
        return self.custom_b.get(".".join([parts[0], parts[1], "0", "0"]), "")

    def _load_qqwry(self) -> QQwry | None:
        if not self._qqwry_loaded:
            self._qqwry_loaded = True
            path = self.root / "thirdparty" / "qqwry" / "qqwry.dat"
            try:
                if path.exists():
                    self._qqwry = QQwry.from_file(path)
                else:
                    data = fetch_online()
                    try:
                        path.write_bytes(data)
                    except OSError as exc:
                        get_runtime_logger().error(str(exc))
                    self._qqwry = QQwry(data)
            except Exception as exc:
                get_runtime_logger().error(str(exc))
        return self._qqwry

    def find_public_ip(self, ip: str) -> str:
        db = self._load_qqwry()
        if db is None:
            return ""
        return db.find(ip).country