"""BLE stack parameters and start-up advertising policy."""

from __future__ import annotations

from dataclasses import dataclass

from .config import BadgeConfig
from .peripheral import Peripheral

BLE_BUFF_LEN = 64 + 4  # MTU = 64
BLE_TX_NUM_EVENT = 1
BLE_TX_POWER_DBM = 6
BLE_MEMHEAP_SIZE = 1024 * 6
CENTRAL_MAX_CONNECTION = 1
BLE_BUFF_NUM = 512 // 23
PERIPHERAL_MAX_CONNECTION = 1
SEL_RTC_CLOCK = 1 << 7
LSI_CALIBRATION_LEVEL = 128
RTC_START = (2020, 1, 1, 0, 0, 0)
MAC_SIZE = 6


@dataclass(frozen=True)
class BleHardwareConfig:
    mac: bytes
    mem_len: int = BLE_MEMHEAP_SIZE
    buf_max_len: int = BLE_BUFF_LEN
    buf_number: int = BLE_BUFF_NUM
    tx_num_event: int = BLE_TX_NUM_EVENT
    tx_power_dbm: int = BLE_TX_POWER_DBM
    connect_number: int = (PERIPHERAL_MAX_CONNECTION & 3) | (CENTRAL_MAX_CONNECTION << 2)
    sel_rtc_clock: int = SEL_RTC_CLOCK


def hardware_config(mac: bytes) -> BleHardwareConfig:
    """Stack configuration for a device with the given MAC address."""
    mac = bytes(mac)
    if len(mac) != MAC_SIZE:
        raise ValueError(f"MAC address must be {MAC_SIZE} bytes, got {len(mac)}")
    return BleHardwareConfig(mac)


def ble_setup(config: BadgeConfig, peripheral: Peripheral) -> bool:
    """Advertise only when always-on is configured; return whether advertising."""
    if config.ble_always_on:
        peripheral.enable_advertise()
    else:
        peripheral.disable_advertise()
    return peripheral.advertising