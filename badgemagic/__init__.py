"""Model of an LED name badge: bitmaps, animations, data flash, configuration and BLE control protocols."""

__version__ = "0.1.0"