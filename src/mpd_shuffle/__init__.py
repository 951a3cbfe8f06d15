"""mpd-shuffle - keeps an MPD queue topped up with random tracks."""

__version__ = "0.5.1"
