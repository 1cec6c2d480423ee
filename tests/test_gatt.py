import pytest

from badgemagic.gatt import (
    ATT_ERR_ATTR_NOT_FOUND,
    ATT_ERR_INVALID_OFFSET,
    ATT_ERR_READ_NOT_PERMITTED,
    ATT_ERR_WRITE_NOT_PERMITTED,
    BATT_LEVEL_UUID,
    FIRMWARE_REV_UUID,
    GATT_CLIENT_CHAR_CFG_UUID,
    HARDWARE_REV_UUID,
    LEGACY_RX_UUID,
    MANUFACTURER_NAME_UUID,
    MODEL_NUMBER_UUID,
    NG_RX_UUID,
    NG_TX_UUID,
    SYSTEM_ID_UUID,
    AttError,
    BatteryService,
    DeviceInfoService,
    LegacyService,
    NgService,
)
from badgemagic.legacyctrl import LegacyReceiver


def test_devinfo_model_and_manufacturer():
    svc = DeviceInfoService("v1.0")
    assert svc.read(MODEL_NUMBER_UUID) == b"BM1144"
    assert svc.read(MANUFACTURER_NAME_UUID) == b"FOSSASIA"
    assert svc.read(HARDWARE_REV_UUID) == b"20240908"
    assert svc.read(SYSTEM_ID_UUID) == bytes(8)


def test_devinfo_usbc_variant():
    svc = DeviceInfoService("v1.0", usbc=True)
    assert svc.read(MODEL_NUMBER_UUID) == b"BM1144-C"
    assert svc.read(FIRMWARE_REV_UUID) == b"(C) v1.0"


def test_devinfo_offset_and_max_len():
    svc = DeviceInfoService("v1.0")
    full = svc.read(MANUFACTURER_NAME_UUID)
    assert svc.read(MANUFACTURER_NAME_UUID, 2, 3) == full[2:5]


def test_devinfo_invalid_offset():
    svc = DeviceInfoService("v1.0")
    with pytest.raises(AttError) as exc:
        svc.read(MODEL_NUMBER_UUID, 6)
    assert exc.value.code == ATT_ERR_INVALID_OFFSET


def test_devinfo_unknown_uuid():
    with pytest.raises(AttError) as exc:
        DeviceInfoService("v").read(0x2A30)
    assert exc.value.code == ATT_ERR_ATTR_NOT_FOUND


def test_battery_read():
    svc = BatteryService(lambda: 42)
    assert svc.read(BATT_LEVEL_UUID) == bytes([42])
    with pytest.raises(AttError) as exc:
        svc.read(0x2A1A)
    assert exc.value.code == ATT_ERR_ATTR_NOT_FOUND


def test_legacy_write_feeds_receiver():
    receiver = LegacyReceiver(lambda image: None)
    svc = LegacyService(receiver)
    assert svc.write(LEGACY_RX_UUID, b"wang\x00".ljust(16, b"\x00")) is False
    assert receiver.packets_received == 1


def test_legacy_refused_packet_is_swallowed():
    receiver = LegacyReceiver(lambda image: None)
    svc = LegacyService(receiver)
    assert svc.write(LEGACY_RX_UUID, b"short") is False
    assert receiver.packets_received == 0


def test_legacy_unknown_uuid():
    svc = LegacyService(LegacyReceiver(lambda image: None))
    with pytest.raises(AttError) as exc:
        svc.write(0xFEE2, bytes(16))
    assert exc.value.code == ATT_ERR_ATTR_NOT_FOUND


def test_ng_write_rx_calls_parse():
    seen = []

    def parse(value):
        seen.append(value)
        return 7

    svc = NgService(parse)
    assert svc.write(NG_RX_UUID, b"\x02\x00") == 7
    assert seen == [b"\x02\x00"]


def test_ng_cccd_round_trip_and_notify():
    svc = NgService(lambda v: 0)
    svc.write(GATT_CLIENT_CHAR_CFG_UUID, b"\x01\x00")
    assert svc.read(GATT_CLIENT_CHAR_CFG_UUID) == b"\x01\x00"
    svc.notify(b"\x00")
    assert svc.sent == [b"\x00"]


def test_ng_notify_disabled():
    svc = NgService(lambda v: 0)
    with pytest.raises(RuntimeError):
        svc.notify(b"\x00")


def test_ng_notify_exceeds_mtu():
    svc = NgService(lambda v: 0, mtu=4)
    svc.write(GATT_CLIENT_CHAR_CFG_UUID, b"\x01\x00")
    with pytest.raises(ValueError):
        svc.notify(bytes(5))


def test_ng_permissions():
    svc = NgService(lambda v: 0)
    with pytest.raises(AttError) as exc:
        svc.write(NG_TX_UUID, b"\x00")
    assert exc.value.code == ATT_ERR_WRITE_NOT_PERMITTED
    with pytest.raises(AttError) as exc:
        svc.read(NG_RX_UUID)
    assert exc.value.code == ATT_ERR_READ_NOT_PERMITTED


def test_ng_disconnect_resets_cccd():
    calls = []
    svc = NgService(lambda v: 0)
    svc.on_link_lost = lambda: calls.append(True)
    svc.write(GATT_CLIENT_CHAR_CFG_UUID, b"\x01\x00")
    svc.on_disconnect()
    assert svc.notify_enabled is False
    assert calls == [True]
    with pytest.raises(RuntimeError):
        svc.notify(b"\x00")