"""ReadGrove: read aloud at a good volume, grow a forest."""

__version__ = "0.1.0"
