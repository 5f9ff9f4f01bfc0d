"""Read, set, increment, decrement or toggle the display backlight, with fading."""

__version__ = "0.3.0"
