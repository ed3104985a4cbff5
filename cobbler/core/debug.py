# cobbler/core/debug.py
import os
import time
from pathlib import Path


LOG_PATH = Path(__file__).resolve().parents[2] / "cobbler_debug.log"


def debug_enabled() -> bool:
    return os.getenv("COBBLER_DEBUG", "").strip() in {"1", "true", "yes", "on"}


def debug_log(message: str) -> None:
    if not debug_enabled():
        return

    line = f"[{time.strftime('%Y-%m-%d %H:%M:%S')}] {message}\n"
    try:
        with LOG_PATH.open("a", encoding="utf-8") as f:
            f.write(line)
    except OSError:
        pass

    try:
        print(f"[DEBUG] {message}")
    except Exception:
        pass
