"""Game engine building blocks: version info, input state, resource paths, CFG files and resource import lists."""

__version__ = "0.1.0"