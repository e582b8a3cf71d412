"""Server and worker configuration loaded from YAML files."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any

import yaml


class RunMode(str, enum.Enum):
    """Run mode of the system: Release for production, Debug for development."""

    RELEASE = "Release"
    DEBUG = "Debug"


RUN_MODE = RunMode.RELEASE

ROOT_ENV = "NEMO_ROOT"


def _key(name: str, default: Any = None, factory: Any = None):
    if factory is not None:
        metadata = {"yaml": name}
        if isinstance(factory, type) and is_dataclass(factory):
            metadata["nested"] = factory
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata={"yaml": name})


@dataclass
class Web:
    host: str = _key("host", "")
    port: int = _key("port", 0)
    username: str = _key("username", "")
    password: str = _key("password", "")
    web_files: str = _key("webfiles", "")


@dataclass
class RPC:
    host: str = _key("host", "")
    port: int = _key("port", 0)
    auth_key: str = _key("authKey", "")


@dataclass
class Database:
    host: str = _key("host", "")
    port: int = _key("port", 0)
    dbname: str = _key("name", "")
    username: str = _key("username", "")
    password: str = _key("password", "")


@dataclass
class Rabbitmq:
    host: str = _key("host", "")
    port: int = _key("port", 0)
    username: str = _key("username", "")
    password: str = _key("password", "")


@dataclass
class TaskSlice:
    ip_slice_number: int = _key("ipSliceNumber", 0)
    port_slice_number: int = _key("portSliceNumber", 0)


@dataclass
class APIKey:
    name: str = _key("name", "")
    key: str = _key("key", "")


@dataclass
class API:
    fofa: APIKey = _key("fofa", factory=APIKey)
    icp: APIKey = _key("icp", factory=APIKey)
    quake: APIKey = _key("quake", factory=APIKey)
    hunter: APIKey = _key("hunter", factory=APIKey)


@dataclass
class Portscan:
    is_ping: bool = _key("ping", False)
    port: str = _key("port", "")
    rate: int = _key("rate", 0)
    tech: str = _key("tech", "")
    cmdbin: str = _key("cmdbin", "")


@dataclass
class _Xray:
    poc_path: str = _key("pocPath", "")
    latest_version: str = _key("latest", "")


@dataclass
class _PocTool:
    poc_path: str = _key("pocPath", "")
    threads: int = _key("threads", 0)


@dataclass
class Pocscan:
    xray: _Xray = _key("xray", factory=_Xray)
    pocsuite: _PocTool = _key("pocsuite", factory=_PocTool)
    nuclei: _PocTool = _key("nuclei", factory=_PocTool)


@dataclass
class Domainscan:
    resolver: str = _key("resolver", "")
    wordlist: str = _key("wordlist", "")
    massdns_threads: int = _key("massdnsThreads", 0)
    provider_config: str = _key("providerConfig", "")


def _from_dict(cls: type, data: Any) -> Any:
    obj = cls()
    if not isinstance(data, dict):
        return obj
    for f in fields(cls):
        key = f.metadata.get("yaml", f.name)
        if key not in data:
            continue
        value = data[key]
        nested = f.metadata.get("nested")
        if nested is not None:
            value = _from_dict(nested, value)
        elif value is None:
            continue
        setattr(obj, f.name, value)
    return obj


def _to_dict(obj: Any) -> dict:
    result = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if is_dataclass(value):
            value = _to_dict(value)
        result[f.metadata.get("yaml", f.name)] = value
    return result


def _assign(target: Any, source: Any) -> None:
    for f in fields(target):
        setattr(target, f.name, getattr(source, f.name))


@dataclass
class ServerConfig:
    web: Web = _key("web", factory=Web)
    rpc: RPC = _key("rpc", factory=RPC)
    database: Database = _key("database", factory=Database)
    rabbitmq: Rabbitmq = _key("rabbitmq", factory=Rabbitmq)
    task: TaskSlice = _key("task", factory=TaskSlice)

    @staticmethod
    def _path() -> Path:
        return Path(get_root_path()) / "conf" / "server.yml"

    def reload_config(self) -> None:
        """Load the configuration from conf/server.yml."""
        data = yaml.safe_load(self._path().read_text(encoding="utf-8"))
        _assign(self, _from_dict(ServerConfig, data))

    def write_config(self) -> None:
        """Write the configuration to conf/server.yml."""
        content = yaml.safe_dump(_to_dict(self), sort_keys=False, allow_unicode=True)
        self._path().write_text(content, encoding="utf-8")


@dataclass
class WorkerConfig:
    rpc: RPC = _key("rpc", factory=RPC)
    rabbitmq: Rabbitmq = _key("rabbitmq", factory=Rabbitmq)
    api: API = _key("api", factory=API)
    portscan: Portscan = _key("portscan", factory=Portscan)
    domainscan: Domainscan = _key("domainscan", factory=Domainscan)
    pocscan: Pocscan = _key("pocscan", factory=Pocscan)

    def reload_config(self) -> None:
        """Load the configuration from conf/worker.yml."""
        path = Path(get_root_path()) / "conf" / "worker.yml"
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        _assign(self, _from_dict(WorkerConfig, data))


_server_config: ServerConfig | None = None
_worker_config: WorkerConfig | None = None


def get_root_path() -> str:
    """Root directory of the runtime files, overridable with NEMO_ROOT."""
    return os.environ.get(ROOT_ENV, ".")


def global_server_config() -> ServerConfig:
    """Return the process-wide server configuration, loading it once."""
    global _server_config
    if _server_config is None:
        config = ServerConfig()
        config.reload_config()
        _server_config = config
    return _server_config


def global_worker_config() -> WorkerConfig:
    """Return the process-wide worker configuration, loading it once."""
    global _worker_config
    if _worker_config is None:
        config = WorkerConfig()
        config.reload_config()
        _worker_config = config
    return _worker_config