"""GATT services offered by the badge: device info, battery, legacy and control."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .debug import get_logger
from .legacyctrl import LegacyReceiver, LegacyRxError

GATT_PROP_READ = 0x02
GATT_PROP_WRITE = 0x08
GATT_PROP_NOTIFY = 0x10

GATT_PERMIT_READ = 0x01
GATT_PERMIT_WRITE = 0x02

ATT_ERR_READ_NOT_PERMITTED = 0x02
ATT_ERR_WRITE_NOT_PERMITTED = 0x03
ATT_ERR_INVALID_OFFSET = 0x07
ATT_ERR_ATTR_NOT_FOUND = 0x0A

ATT_DEFAULT_MTU = 23

PRIMARY_SERVICE_UUID = 0x2800
CHARACTER_UUID = 0x2803
GATT_CLIENT_CHAR_CFG_UUID = 0x2902
GATT_CLIENT_CFG_NOTIFY = 0x0001

DEVINFO_SERV_UUID = 0x180A
SYSTEM_ID_UUID = 0x2A23
MODEL_NUMBER_UUID = 0x2A24
SERIAL_NUMBER_UUID = 0x2A25
FIRMWARE_REV_UUID = 0x2A26
HARDWARE_REV_UUID = 0x2A27
SOFTWARE_REV_UUID = 0x2A28
MANUFACTURER_NAME_UUID = 0x2A29

BATT_SERV_UUID = 0x180F
BATT_LEVEL_UUID = 0x2A19

LEGACY_SERV_UUID = 0xFEE0
LEGACY_RX_UUID = 0xFEE1

NG_SERV_UUID = 0xF055
NG_TX_UUID = 0xF056
NG_RX_UUID = 0xF057
NG_TX_SIZE = 256

MODEL_NUMBER = "BM1144"
HARDWARE_REV = "20240908"
MANUFACTURER = "FOSSASIA"
NOT_AVAILABLE = "N/A"

_log = get_logger("gatt")


class AttError(Exception):
    """An attribute request failed; ``code`` is the ATT error code."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class Characteristic:
    uuid: int
    value: bytes
    props: int = GATT_PROP_READ


class DeviceInfoService:
    """Read-only device information characteristics."""

    uuid = DEVINFO_SERV_UUID

    def __init__(self, firmware_rev: str, usbc: bool = False) -> None:
        prefix, suffix = ("(C) ", "-C") if usbc else ("", "")
        values = (
            (SYSTEM_ID_UUID, bytes(8)),
            (MODEL_NUMBER_UUID, (MODEL_NUMBER + suffix).encode("ascii")),
            (SERIAL_NUMBER_UUID, NOT_AVAILABLE.encode("ascii")),
            (FIRMWARE_REV_UUID, (prefix + firmware_rev).encode("utf-8")),
            (HARDWARE_REV_UUID, HARDWARE_REV.encode("ascii")),
            (SOFTWARE_REV_UUID, NOT_AVAILABLE.encode("ascii")),
            (MANUFACTURER_NAME_UUID, MANUFACTURER.encode("ascii")),
        )
        self.characteristics = {
            uuid: Characteristic(uuid, value, GATT_PROP_READ) for uuid, value in values
        }

    def read(self, uuid: int, offset: int = 0, max_len: int = ATT_DEFAULT_MTU - 1) -> bytes:
        """Return up to ``max_len`` bytes of a characteristic from ``offset``."""
        char = self.characteristics.get(uuid)
        if char is None:
            raise AttError(ATT_ERR_ATTR_NOT_FOUND, f"no characteristic {uuid:#06x}")
        if not 0 <= offset < len(char.value):
            raise AttError(ATT_ERR_INVALID_OFFSET, f"offset {offset} past end of value")
        return char.value[offset:offset + max_len]


class BatteryService:
    """Battery level, read fresh from ``battery_percent`` on every request."""

    uuid = BATT_SERV_UUID

    def __init__(self, battery_percent: Callable[[], int]) -> None:
        self._battery_percent = battery_percent
        self.level = Characteristic(BATT_LEVEL_UUID, b"\x00", GATT_PROP_READ)

    def read(self, uuid: int) -> bytes:
        if uuid != BATT_LEVEL_UUID:
            raise AttError(ATT_ERR_ATTR_NOT_FOUND, f"no characteristic {uuid:#06x}")
        return bytes([self._battery_percent() & 0xFF])


class LegacyService:
    """Write-only characteristic that feeds packets to a legacy receiver."""

    uuid = LEGACY_SERV_UUID

    def __init__(self, receiver: LegacyReceiver) -> None:
        self.receiver = receiver
        self.rx = Characteristic(LEGACY_RX_UUID, bytes(16), GATT_PROP_WRITE)

    def write(self, uuid: int, value: bytes) -> bool:
        """Hand ``value`` to the receiver; True when an image was completed.

        A refused packet is logged and acknowledged as the client expects.
        """
        if uuid != LEGACY_RX_UUID:
            raise AttError(ATT_ERR_ATTR_NOT_FOUND, f"no characteristic {uuid:#06x}")
        try:
            return self.receiver.feed(value)
        except LegacyRxError as exc:
            _log.debug("legacy packet refused (%s): %s", exc.code.name, exc)
            return False


class NgService:
    """Control service: commands are written to RX, replies are notified on TX."""

    uuid = NG_SERV_UUID

    _PERMISSIONS = {
        NG_RX_UUID: GATT_PERMIT_WRITE,
        NG_TX_UUID: GATT_PERMIT_READ,
        GATT_CLIENT_CHAR_CFG_UUID: GATT_PERMIT_READ | GATT_PERMIT_WRITE,
    }

    def __init__(self, parse: Callable[[bytes], int], mtu: int = ATT_DEFAULT_MTU) -> None:
        if mtu <= 0:
            raise ValueError(f"invalid MTU: {mtu}")
        self._parse = parse
        self.mtu = mtu
        self.cccd = 0
        self.tx_value = b""
        self.sent: list[bytes] = []
        self.on_link_lost: Callable[[], None] | None = None

    @property
    def notify_enabled(self) -> bool:
        return bool(self.cccd & GATT_CLIENT_CFG_NOTIFY)

    def _permission(self, uuid: int) -> int:
        perm = self._PERMISSIONS.get(uuid)
        if perm is None:
            raise AttError(ATT_ERR_ATTR_NOT_FOUND, f"no characteristic {uuid:#06x}")
        return perm

    def write(self, uuid: int, value: bytes) -> int | None:
        """Write an attribute; a command written to RX returns its status."""
        if not self._permission(uuid) & GATT_PERMIT_WRITE:
            raise AttError(ATT_ERR_WRITE_NOT_PERMITTED, f"{uuid:#06x} is not writable")
        value = bytes(value)
        if uuid == GATT_CLIENT_CHAR_CFG_UUID:
            if len(value) != 2:
                raise AttError(ATT_ERR_INVALID_OFFSET, "client configuration is 2 bytes")
            self.cccd = int.from_bytes(value, "little") & GATT_CLIENT_CFG_NOTIFY
            _log.debug("CCCD changed: %02X", self.cccd)
            return None
        return self._parse(value)

    def read(self, uuid: int, offset: int = 0, max_len: int = ATT_DEFAULT_MTU - 1) -> bytes:
        if not self._permission(uuid) & GATT_PERMIT_READ:
            raise AttError(ATT_ERR_READ_NOT_PERMITTED, f"{uuid:#06x} is not readable")
        if uuid == GATT_CLIENT_CHAR_CFG_UUID:
            return self.cccd.to_bytes(2, "little")
        return self.tx_value[offset:offset + max_len]

    def notify(self, value: bytes) -> None:
        """Send ``value`` to the connected client over the TX characteristic."""
        value = bytes(value)
        if not self.notify_enabled:
            raise RuntimeError("notifications are not enabled")
        if len(value) > self.mtu:
            raise ValueError(f"notification of {len(value)} bytes exceeds MTU {self.mtu}")
        self.sent.append(value)
        _log.debug("notification sent")

    def on_disconnect(self) -> None:
        """Forget the client's configuration when the link drops."""
        self.cccd = 0
        if self.on_link_lost:
            self.on_link_lost()