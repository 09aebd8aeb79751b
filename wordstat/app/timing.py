import sys
import time
from typing import Dict, Optional, TextIO

def format_elapsed(milliseconds: int) -> str:
    return f"{milliseconds // 1000}s {milliseconds % 1000}ms"

class TimeLogger:
    """Mide el tiempo desde la marca anterior y lo imprime por fase."""

    def __init__(self, echo: bool = True, stream: Optional[TextIO] = None):
        self.echo = echo
        self.stream = stream
        self.phases: Dict[str, int] = {}
        self._prev = time.monotonic()

    def log_time(self, label: str) -> int:
        now = time.monotonic()
        milliseconds = int((now - self._prev) * 1000)
        self.phases[label] = milliseconds
        if self.echo:
            out = self.stream or sys.stdout
            out.write(f"Time spent for {label}: {format_elapsed(milliseconds)}\n")
            out.flush()
        self._prev = now
        return milliseconds
