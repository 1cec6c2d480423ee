"""BLE peripheral role: advertising payloads and the single-link policy."""

from __future__ import annotations

from dataclasses import dataclass, field

ADV_UUID = 0xFEE0

GAP_ADTYPE_FLAGS = 0x01
GAP_ADTYPE_16BIT_MORE = 0x02
GAP_ADTYPE_LOCAL_NAME_COMPLETE = 0x09
GAP_ADTYPE_POWER_LEVEL = 0x0A
GAP_ADTYPE_SLAVE_CONN_INTERVAL_RANGE = 0x12
GAP_ADTYPE_FLAGS_GENERAL = 0x02
GAP_ADTYPE_FLAGS_BREDR_NOT_SUPPORTED = 0x04

SBP_PARAM_UPDATE_DELAY = 1600  # units of 0.625 ms
SLAVE_LATENCY = 0
MIN_ADV_INTERVAL = 100  # units of 0.625 ms
MAX_ADV_INTERVAL = 200  # units of 0.625 ms
MIN_CONN_INTERVAL = 20  # units of 1.25 ms
MAX_CONN_INTERVAL = 100  # units of 1.25 ms
CONN_TIMEOUT = 100  # units of 10 ms
TX_POWER_DBM = 9
GAP_MIN_CONN_INTERVAL = 6
GAP_MAX_CONN_INTERVAL = 500

SCAN_RSP_MAX = 31
MAX_NAME = 20


def _u16(value: int) -> bytes:
    return value.to_bytes(2, "little")


def advert_data() -> bytes:
    """Advertising payload: flags and the service UUID."""
    return bytes([
        0x02, GAP_ADTYPE_FLAGS,
        GAP_ADTYPE_FLAGS_GENERAL | GAP_ADTYPE_FLAGS_BREDR_NOT_SUPPORTED,
        0x03, GAP_ADTYPE_16BIT_MORE,
    ]) + _u16(ADV_UUID)


def scan_response_data(name: bytes | str) -> bytes:
    """Scan response: connection interval range, TX power and the name."""
    if isinstance(name, str):
        name = name.encode("latin-1")
    name = bytes(name)
    if len(name) > MAX_NAME:
        raise ValueError(f"device name longer than {MAX_NAME} bytes")
    prefix = (bytes([0x05, GAP_ADTYPE_SLAVE_CONN_INTERVAL_RANGE])
              + _u16(MIN_CONN_INTERVAL) + _u16(MAX_CONN_INTERVAL)
              + bytes([0x02, GAP_ADTYPE_POWER_LEVEL, TX_POWER_DBM,
                       len(name) + 1, GAP_ADTYPE_LOCAL_NAME_COMPLETE]))
    return prefix + name


@dataclass
class Connection:
    handle: int
    interval: int = 0
    latency: int = 0
    timeout: int = 0


@dataclass
class _Rejected:
    handle: int
    requested: tuple[int, int, int, int] = field(
        default=(MIN_CONN_INTERVAL, MAX_CONN_INTERVAL, SLAVE_LATENCY, CONN_TIMEOUT))


class Peripheral:
    """Tracks the one allowed connection and whether advertising is on."""

    def __init__(self, devname: bytes | str) -> None:
        if isinstance(devname, str):
            devname = devname.encode("latin-1")
        self.devname = bytes(devname)[:MAX_NAME].ljust(MAX_NAME, b"\x00")
        self.advert_data = advert_data()
        self.scan_response = scan_response_data(self.devname)
        self.advertising = False
        self.connection: Connection | None = None
        self.rejected: list[int] = []

    def enable_advertise(self) -> None:
        self.advertising = True

    def disable_advertise(self) -> None:
        self.advertising = False

    def on_link_established(self, handle: int, interval: int, latency: int,
                            timeout: int) -> bool:
        """Accept the link unless one is already up; return whether accepted."""
        if self.connection is not None:
            self.rejected.append(handle)
            return False
        self.connection = Connection(handle, interval, latency, timeout)
        self.advertising = False
        return True

    def on_link_terminated(self, handle: int) -> None:
        self.advertising = True
        if self.connection is not None and self.connection.handle == handle:
            self.connection = None

    def on_param_update(self, handle: int, interval: int, latency: int,
                        timeout: int) -> None:
        self.connection = Connection(handle, interval, latency, timeout)