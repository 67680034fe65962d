from __future__ import annotations

import os


def parity_enabled() -> bool:
    return os.getenv("APSPECIAL_RUN_PARITY", "0") == "1"


__all__ = ["parity_enabled"]
