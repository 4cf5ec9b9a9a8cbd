"""
drand_beacon.utils
------------------

Small shared helpers (hex/bytes codecs, round encoding). This package file
deliberately avoids eager imports.
"""

__all__: list[str] = []
