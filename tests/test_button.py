import pytest

from badgemagic.button import LONGPRESS_THRES, ButtonScanner, Key


def _recorder():
    calls = []
    return calls, lambda: calls.append(1)


def test_single_sample_is_filtered_out():
    scanner = ButtonScanner()
    presses, handler = _recorder()
    scanner.on_press(Key.KEY1, handler)
    assert scanner.scan(Key.KEY1, True) is False
    for _ in range(20):
        assert scanner.scan(Key.KEY1, False) is False
    assert presses == []


def test_short_press_fires_on_release():
    scanner = ButtonScanner()
    presses, on_press = _recorder()
    longs, on_long = _recorder()
    scanner.on_press(Key.KEY2, on_press)
    scanner.on_long_press(Key.KEY2, on_long)
    held = [scanner.scan(Key.KEY2, True) for _ in range(10)]
    assert held[-1] is True
    assert presses == []
    released = [scanner.scan(Key.KEY2, False) for _ in range(20)]
    assert released[-1] is False
    assert presses == [1]
    assert longs == []


def test_long_press_fires_once_and_no_short_press():
    scanner = ButtonScanner()
    presses, on_press = _recorder()
    longs, on_long = _recorder()
    scanner.on_press(Key.KEY1, on_press)
    scanner.on_long_press(Key.KEY1, on_long)
    held = [scanner.scan(Key.KEY1, True) for _ in range(LONGPRESS_THRES * 3)]
    assert held[-1] is True
    assert longs == [1]
    released = [scanner.scan(Key.KEY1, False) for _ in range(20)]
    assert released[-1] is False
    assert presses == []
    assert longs == [1]


def test_keys_are_independent():
    scanner = ButtonScanner()
    presses1, h1 = _recorder()
    presses2, h2 = _recorder()
    scanner.on_press(Key.KEY1, h1)
    scanner.on_press(Key.KEY2, h2)
    for _ in range(10):
        state1 = scanner.scan(Key.KEY1, True)
        state2 = scanner.scan(Key.KEY2, False)
    assert (state1, state2) == (True, False)
    for _ in range(20):
        state1 = scanner.scan(Key.KEY1, False)
        state2 = scanner.scan(Key.KEY2, False)
    assert (state1, state2) == (False, False)
    assert presses1 == [1]
    assert presses2 == []


def test_scan_all_requires_one_sample_per_key():
    with pytest.raises(ValueError):
        ButtonScanner().scan_all([True])


def test_unknown_key_rejected():
    with pytest.raises(ValueError):
        ButtonScanner().on_press(len(Key), lambda: None)