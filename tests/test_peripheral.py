import pytest

from badgemagic.peripheral import (
    ADV_UUID,
    GAP_ADTYPE_LOCAL_NAME_COMPLETE,
    MAX_NAME,
    SCAN_RSP_MAX,
    Connection,
    Peripheral,
    advert_data,
    scan_response_data,
)


def test_advert_data_wire_bytes():
    data = advert_data()
    assert data[:2] == bytes([0x02, 0x01])
    assert data[3] == 0x03
    assert data[-2:] == ADV_UUID.to_bytes(2, "little")


def test_scan_response_carries_name():
    name = b"badge"
    rsp = scan_response_data(name)
    assert rsp[:2] == bytes([0x05, 0x12])
    assert rsp[9] == len(name) + 1
    assert rsp[10] == GAP_ADTYPE_LOCAL_NAME_COMPLETE
    assert rsp.endswith(name)


def test_full_name_fills_scan_response():
    rsp = scan_response_data(b"n" * MAX_NAME)
    assert len(rsp) == SCAN_RSP_MAX


def test_name_too_long():
    with pytest.raises(ValueError):
        scan_response_data(b"n" * (MAX_NAME + 1))


def test_devname_padded_to_field():
    p = Peripheral("LED Badge Magic")
    assert len(p.devname) == MAX_NAME
    assert p.devname.rstrip(b"\x00") == b"LED Badge Magic"
    assert p.scan_response.endswith(p.devname)


def test_single_connection_policy():
    p = Peripheral("badge")
    p.enable_advertise()
    assert p.on_link_established(1, 20, 0, 100) is True
    assert p.advertising is False
    assert p.connection == Connection(1, 20, 0, 100)
    assert p.on_link_established(2, 20, 0, 100) is False
    assert p.rejected == [2]
    assert p.connection.handle == 1


def test_termination_restarts_advertising():
    p = Peripheral("badge")
    p.on_link_established(1, 20, 0, 100)
    p.on_link_terminated(5)
    assert p.advertising is True
    assert p.connection.handle == 1
    p.on_link_terminated(1)
    assert p.connection is None


def test_param_update_replaces_connection():
    p = Peripheral("badge")
    p.on_link_established(1, 20, 0, 100)
    p.on_param_update(1, 40, 2, 300)
    assert p.connection == Connection(1, 40, 2, 300)