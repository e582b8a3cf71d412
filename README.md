# nemo

Core building blocks for collecting and storing network assets found during
reconnaissance: IP addresses, open ports, domains, their attributes and
vulnerabilities, plus local lookup helpers used while scanning.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

- `nemo.conf` – server and worker settings (`ServerConfig`, `WorkerConfig`)
  loaded from `conf/server.yml` and `conf/worker.yml` under the root
  directory. `get_root_path()` returns that root: the `NEMO_ROOT` environment
  variable, or the current directory. `global_server_config()` and
  `global_worker_config()` load each file once per process;
  `ServerConfig.write_config()` writes the server settings back.
- `nemo.logs` – `get_runtime_logger()` writes JSON lines to
  `log/runtime.log` (falling back to the console if the file cannot be
  opened); `get_cli_logger()` logs to the console with a text format.
- `nemo.taskstate` – `TaskState`, `TaskResult`, `WorkerStatus` and the AMQP
  broker URLs (`amqp_url()`, `server_amqp_url()`, `worker_amqp_url()`).
- `nemo.custom` – local data lookups:
  - `honeypot.HoneyPot` matches hosts and ports against
    `thirdparty/custom/honeypot.txt` (lines of `<host> <ports|-> <system>`);
  - `qqwry.QQwry` reads the QQwry IP location database;
    `fetch_online()` downloads it from the URLs in the `NEMO_QQWRY_URL` and
    `NEMO_QQWRY_KEY_URL` environment variables;
  - `iplocation.IpLocation` resolves custom locations (exact, class C, class B)
    and public locations from `thirdparty/qqwry/qqwry.dat`, downloading the
    file when it is missing;
  - `portservice.PortService` maps port numbers to service names from
    `thirdparty/nmap/nmap-services`, preferring
    `thirdparty/custom/services-custom.txt` for IPs with a custom location;
  - `cdncheck.CDNCheck` tells whether an IP lies in a known CDN range, or
    whether a domain's CNAME belongs to a CDN provider.
- `nemo.db` – SQLAlchemy models for organizations, IPs, ports, domains (with
  attributes, color tags and memos), tasks, scheduled tasks and
  vulnerabilities, with get, search, count, update, delete and
  `save_or_update()` helpers. `connection.configure()` selects the database,
  `connection.init_schema()` creates the tables.
- `nemo.domainscan` – `result.DomainScanResult` collects scanned domains and
  their attributes and saves them to the database; `resolve.Resolve` resolves
  domains to IPv4 addresses and records A, CDN and CNAME attributes.
- `nemo.keepalive` – worker heartbeat data (`KeepAliveInfo`,
  `WorkerRegistry`) and synchronisation of the custom data files between
  server and workers by MD5 hash.

## Example

```python
from nemo.custom.honeypot import HoneyPot

hp = HoneyPot("thirdparty/custom/honeypot.txt")
found, systems = hp.check_honeypot("192.0.2.10", "80,443")
```

```python
from nemo.db.connection import configure, init_schema
from nemo.db.ip import Ip

configure("sqlite:///nemo.db")
init_schema()
Ip(ip_name="192.0.2.1", location="lab", status="up").save_or_update()
```

Without `configure()`, the database is the MySQL server named in
`conf/server.yml`, reached through the `mysql+pymysql` SQLAlchemy dialect;
install the PyMySQL driver yourself to use it. `configure()` points the
package anywhere SQLAlchemy can reach.

## What this package does not do

It has no command-line programs, no web interface, no RPC server and no task
queue workers: it provides the settings, storage, lookups and result types
such programs would use. It runs no scanners (port scans, subdomain
enumeration, brute forcing, crawling, screenshots, fingerprinting or
proof-of-concept checks) and does not look up ASNs. Heartbeats are built and
answered by `nemo.keepalive`, but sending them over the network is left to
the caller.