"""Match hosts and ports against a list of known honeypots."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from nemo.conf import get_root_path
from nemo.logs import get_runtime_logger

_INT = re.compile(r"[+-]?\d+")


def _atoi(text: str) -> int | None:
    return int(text) if _INT.fullmatch(text) else None


@dataclass
class HoneyDef:
    system_name: str
    port_def: dict[int, str] = field(default_factory=dict)


class HoneyPot:
    """Honeypot definitions keyed by domain or IP."""

    def __init__(self, path=None):
        self.honeypots: dict[str, HoneyDef] = {}
        if path is None:
            path = Path(get_root_path()) / "thirdparty" / "custom" / "honeypot.txt"
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            get_runtime_logger().error(str(exc))
        else:
            self.load_text(text)

    def load_text(self, text: str) -> None:
        """Parse lines of the form "<host> <ports|-> <system>"."""
        for line in text.split("\n"):
            txt = line.strip()
            if not txt or txt.startswith("#"):
                continue
            parts = txt.split(" ")
            if len(parts) < 3:
                continue
            domain = parts[0].strip()
            system = parts[2].strip()
            definition = self.honeypots.setdefault(domain, HoneyDef(system))
            if parts[1].strip() == "-":
                continue
            for p in parts[1].split(","):
                port = _atoi(p)
                if port is not None:
                    definition.port_def[port] = system

    def check_honeypot(self, domain: str, ports: str):
        """Return (matched, descriptions) for a host and comma-separated ports."""
        definition = self.honeypots.get(domain)
        if definition is None:
            return False, None
        if not definition.port_def or ports == "":
            return True, [f"{domain}/{definition.system_name}"]
        systems = []
        for p in ports.split(","):
            port = _atoi(p)
            if port is None or port not in definition.port_def:
                continue
            systems.append(f"{domain}:{port}/{definition.port_def[port]}")
        if not systems:
            return False, None
        return True, systems