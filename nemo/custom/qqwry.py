"""Reader for the QQwry IP geolocation database."""

from __future__ import annotations

import os
import struct
import urllib.request
import zlib
from dataclasses import dataclass
from pathlib import Path

INDEX_LEN = 7
REDIRECT_MODE_1 = 0x01
REDIRECT_MODE_2 = 0x02

DATA_URL_ENV = "NEMO_QQWRY_URL"
KEY_URL_ENV = "NEMO_QQWRY_KEY_URL"


@dataclass
class QQwryResult:
    ip: str
    country: str = ""
    area: str = ""


def decrypt_online(body: bytes, key: int) -> bytes:
    """Decrypt the first 0x200 bytes of a downloaded archive and inflate it."""
    data = bytearray(body)
    for i in range(min(0x200, len(data))):
        key = (key * 0x805 + 1) & 0xFF
        data[i] ^= key
    return zlib.decompress(bytes(data))


def _download(url: str) -> bytes:
    with urllib.request.urlopen(url) as resp:
        return resp.read()


def fetch_online() -> bytes:
    """Download the database from the URLs named in the environment."""
    data_url = os.environ.get(DATA_URL_ENV)
    key_url = os.environ.get(KEY_URL_ENV)
    if not data_url or not key_url:
        raise RuntimeError(f"{DATA_URL_ENV} and {KEY_URL_ENV} must be set")
    body = _download(data_url)
    key_body = _download(key_url)
    (key,) = struct.unpack_from("<I", key_body, 5 * 4)
    return decrypt_online(body, key)


class QQwry:
    """In-memory QQwry database."""

    def __init__(self, data: bytes):
        if len(data) < 8:
            raise ValueError("qqwry data too short")
        self.data = bytes(data)
        start, end = struct.unpack_from("<II", self.data, 0)
        self.ip_count = (end - start) // INDEX_LEN + 1

    @classmethod
    def from_file(cls, path) -> "QQwry":
        return cls(Path(path).read_bytes())

    def _uint24(self, offset: int) -> int:
        chunk = self.data[offset:offset + 3]
        if len(chunk) < 3:
            raise ValueError("qqwry data truncated")
        return chunk[0] | chunk[1] << 8 | chunk[2] << 16

    def _uint32(self, offset: int) -> int | None:
        chunk = self.data[offset:offset + 4]
        return struct.unpack("<I", chunk)[0] if len(chunk) == 4 else None

    def _mode(self, offset: int) -> int:
        if offset >= len(self.data):
            raise ValueError("qqwry data truncated")
        return self.data[offset]

    def _string(self, offset: int) -> bytes:
        end = self.data.find(b"\0", offset)
        if end < 0:
            raise ValueError("unterminated string in qqwry data")
        return self.data[offset:end]

    def _area(self, offset: int) -> bytes:
        if self._mode(offset) in (REDIRECT_MODE_1, REDIRECT_MODE_2):
            area_offset = self._uint24(offset + 1)
            return self._string(area_offset) if area_offset else b""
        return self._string(offset)

    def _search_index(self, ip: int) -> int:
        start, end = struct.unpack_from("<II", self.data, 0)
        while True:
            mid = start + (((end - start) // INDEX_LEN) >> 1) * INDEX_LEN
            mid_ip = self._uint32(mid)
            if mid_ip is None:
                return 0
            if end - start == INDEX_LEN:
                offset = self._uint24(mid + 4)
                next_ip = self._uint32(mid + INDEX_LEN)
                if next_ip is not None and ip < next_ip:
                    return offset
                return 0
            if mid_ip > ip:
                end = mid
            elif mid_ip < ip:
                start = mid
            else:
                return self._uint24(mid + 4)
            if start == end:
                return 0

    def find(self, ip: str) -> QQwryResult:
        """Look up country and area for a dotted IPv4 address."""
        result = QQwryResult(ip=ip)
        if ip.count(".") != 3:
            return result
        parts = ip.split(".")
        if not all(p.isdigit() and int(p) < 256 for p in parts):
            raise ValueError(f"invalid IPv4 address: {ip}")
        value = int.from_bytes(bytes(int(p) for p in parts), "big")
        offset = self._search_index(value)
        if offset <= 0:
            return result

        mode = self._mode(offset + 4)
        if mode == REDIRECT_MODE_1:
            country_offset = self._uint24(offset + 5)
            if self._mode(country_offset) == REDIRECT_MODE_2:
                country = self._string(self._uint24(country_offset + 1))
                country_offset += 4
            else:
                country = self._string(country_offset)
                country_offset += len(country) + 1
            area = self._area(country_offset)
        elif mode == REDIRECT_MODE_2:
            country = self._string(self._uint24(offset + 5))
            area = self._area(offset + 8)
        else:
            country = self._string(offset + 4)
            area = self._area(offset + 5 + len(country))

        result.country = country.decode("gbk", errors="replace")
        result.area = area.decode("gbk", errors="replace")
        return result