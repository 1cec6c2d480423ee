# badgemagic

A pure-Python model of an 11×44 LED name badge. It covers what the badge
does with its data — bitmaps, animations, the layout of its data flash, its
configuration record, its buttons and its BLE control protocols — as plain
Python objects and bytes. It is useful for building upload tools, previewing
animations and testing client applications.

Python 3.10 or later; no third-party dependencies.

## Modules

- `badgemagic.bitmap` — `Bitmap` (a list of 16-bit column words plus mode,
  flash, marquee and `anim_step`) and `BitmapList`, the circular playlist with
  `insert`, `append`, `drop`, `go_next`, `go_prev`, `go_head` and
  `clear_others`.
- `badgemagic.animation` — the animations `scroll_left`, `scroll_right`,
  `scroll_up`, `scroll_down`, `fixed`, `animation`, `snowflake`, `picture` and
  `laser`; the overlays `marquee` and `flash`; `animate(bm, fb)`, which picks
  the animation from the low nibble of `bm.modes` (`AnimationMode`).
- `badgemagic.font` — `glyph(char)` returns the six column bytes of a
  character of the 5×7 font (codes 0x20–0x7F; others raise `ValueError`).
- `badgemagic.leddrv` — the charlieplexed wiring: `led_pins(usbc)`,
  `combine_cols`, `column_pin_states`, `row_pin_states` and `strong_drive`,
  with `PinState` and `Pin`.
- `badgemagic.button` — `ButtonScanner` debounces samples of the two keys
  (`Key.KEY1`, `Key.KEY2`) and fires press and long-press handlers.
- `badgemagic.eeprom` — `Eeprom`, an in-memory data flash with `read`,
  `write` and page-wise `erase`; out-of-range access raises `EepromError`.
- `badgemagic.data` — the stored image: `LegacyHeader` (magic `b"wang"`,
  flash and marquee bits, modes and sizes of eight bitmaps), `save_image`,
  `load_bitmap`, `load_bitmaps`, `chunk_to_columns`, `chunk_to_bitmap`,
  `speed_of` and `animation_of`.
- `badgemagic.config` — `BadgeConfig` with `pack`, `unpack` and `fallback`,
  plus `write_config` and `read_config`; problems raise `ConfigError`.
- `badgemagic.legacyctrl` — `LegacyReceiver` assembles 16-byte packets into
  an image and passes it to its `on_complete` callback; refused packets raise
  `LegacyRxError` carrying an `RxErrorCode`.
- `badgemagic.ngctrl` — `NgController` runs commands of the newer protocol
  (power, streaming, BLE settings, splash screen, saving and restoring the
  configuration, brightness and splash speed, always-on mode) and notifies a
  status byte; an unknown command raises `InvalidCommand`.
- `badgemagic.player` — `Badge`, the running state: frame buffer, bitmap
  ring, `Mode`, task set, button wiring, streaming, and text drawing with
  `putchar` and `puts`.
- `badgemagic.peripheral` — `Peripheral` tracks the one allowed `Connection`
  and the advertising flag; `advert_data()` and `scan_response_data(name)`
  build the advertising payloads.
- `badgemagic.blesetup` — `hardware_config(mac)` and
  `ble_setup(config, peripheral)`.
- `badgemagic.gatt` — `DeviceInfoService`, `BatteryService`, `LegacyService`
  and `NgService`; failed attribute requests raise `AttError` with an ATT code.
- `badgemagic.debug` — `get_logger`, `trace` and `hexdump`. Logging goes to
  the `badgemagic` logger, which has only a `NullHandler` by default.

## Examples

Render a step of a scrolling bitmap into a 44-column frame buffer:

```python
from badgemagic.bitmap import Bitmap
from badgemagic.animation import scroll_left

bm = Bitmap(buf=[0x7FF] * 10)
fb = [0] * 44
position = scroll_left(bm, fb)
```

Each column is an integer whose low 11 bits are the LEDs of that column.
Animation functions draw one step, advance `bm.anim_step` and return the
position within the animation cycle; `0` means the cycle has just completed.

Receive an upload into the simulated flash and read the bitmaps back:

```python
from badgemagic.eeprom import Eeprom
from badgemagic.legacyctrl import LegacyReceiver
from badgemagic.data import save_image, load_bitmaps

eeprom = Eeprom()
receiver = LegacyReceiver(on_complete=lambda image: save_image(eeprom, image))

for packet in packets:      # 16-byte packets; the first starts with b"wang\0"
    receiver.feed(packet)   # True once the image is complete

bitmaps = load_bitmaps(eeprom)
```

A packet starting with the magic always begins a new image, and `reset()`
discards a partial one.

Store and read back the configuration. The checksum function is supplied by
the caller; `unpack` accepts a record when the checksum over all its bytes,
checksum byte included, is zero — an XOR of the bytes works:

```python
import functools, operator
from badgemagic.config import BadgeConfig, write_config, read_config
from badgemagic.eeprom import Eeprom

def xor(data: bytes) -> int:
    return functools.reduce(operator.xor, data, 0)

eeprom = Eeprom()
write_config(eeprom, BadgeConfig.fallback(b"", 0, 0, 0), xor)
config = read_config(eeprom, xor)
```

Play stored bitmaps on a badge model:

```python
from badgemagic.player import Badge

badge = Badge(config)
badge.load_bitmaps(eeprom)
delay_us = badge.next_step()   # draws into badge.fb
```

## What it does not do

- It drives no hardware: there is no LED refresh loop, no GPIO, no timers and
  no real data flash. `Eeprom` lives in memory, and `leddrv` only computes pin
  states.
- It has no BLE radio. `Peripheral` and the GATT service classes model the
  decisions and payloads; connecting them to a real stack is left to the user.
- It provides no configuration checksum, splash image or battery reading of
  its own; these are passed in by the caller (`checksum` arguments,
  `BadgeConfig.fallback`, `BatteryService(battery_percent)`).
- It has no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```