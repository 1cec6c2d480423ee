import pytest

from badgemagic.config import (
    CONFIG_SIZE,
    DEFAULT_OFFSET,
    SPLASH_MAX_SIZE,
    BadgeConfig,
    ConfigError,
    read_config,
    write_config,
)
from badgemagic.eeprom import Eeprom


def checksum(data):
    """Two's-complement byte sum: zero over data plus its checksum."""
    return (-sum(data)) % 256


def _config():
    return BadgeConfig.fallback(bytes(range(12)), 16, 6, 6)


def test_fallback_values():
    cfg = _config()
    assert cfg.devname == "LED Badge Magic"
    assert cfg.led_scan_freq == 2000
    assert cfg.splash_speed_t == 30
    assert cfg.ble_always_on is False
    assert cfg.reset_rx is False
    assert cfg.splash_bm_bits == bytes(range(12))


def test_pack_size_and_checksum_byte():
    raw = _config().pack(checksum)
    assert len(raw) == CONFIG_SIZE
    assert checksum(raw) == 0


def test_pack_unpack_round_trip():
    cfg = _config()
    cfg.ble_always_on = True
    cfg.led_brightness = 3
    back = BadgeConfig.unpack(cfg.pack(checksum), checksum)
    assert back.ble_always_on is True
    assert back.led_brightness == 3
    assert back.devname == cfg.devname
    assert back.splash_bm_bits[:12] == cfg.splash_bm_bits
    assert len(back.splash_bm_bits) == SPLASH_MAX_SIZE
    assert (back.splash_bm_w, back.splash_bm_h, back.splash_bm_fh) == (16, 6, 6)


def test_corrupt_record_rejected():
    raw = bytearray(_config().pack(checksum))
    raw[5] ^= 0x01
    with pytest.raises(ConfigError):
        BadgeConfig.unpack(bytes(raw), checksum)


def test_wrong_length_rejected():
    with pytest.raises(ConfigError):
        BadgeConfig.unpack(bytes(10), checksum)


def test_oversized_name_rejected():
    cfg = _config()
    cfg.ble_devname = b"x" * 21
    with pytest.raises(ConfigError):
        cfg.pack(checksum)


def test_flash_round_trip_at_default_offset():
    eeprom = Eeprom()
    cfg = _config()
    write_config(eeprom, cfg, checksum)
    assert eeprom.read(DEFAULT_OFFSET, CONFIG_SIZE) == cfg.pack(checksum)
    assert read_config(eeprom, checksum) == BadgeConfig.unpack(cfg.pack(checksum), checksum)


def test_blank_flash_has_no_config():
    with pytest.raises(ConfigError):
        read_config(Eeprom(), checksum)


def test_write_past_end_rejected():
    eeprom = Eeprom()
    with pytest.raises(ConfigError):
        write_config(eeprom, _config(), checksum, eeprom.size - CONFIG_SIZE + 1)