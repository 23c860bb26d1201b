# util/timing.py
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Any
import logging


@dataclass
class Elapsed:
    ms: int = 0


@contextmanager
def timed(logger: logging.Logger, name: str, **kv: Any) -> Iterator[Elapsed]:
    """
    Usage:
      with timed(logger, "llm.generate", provider="openai") as t:
          ...
      t.ms  # populated on exit
    Emits one INFO on exit: "<name>.done ms=<int> key=val ..."
    """
    elapsed = Elapsed()
    t0 = time.perf_counter()
    try:
        yield elapsed
    finally:
        elapsed.ms = int((time.perf_counter() - t0) * 1000)
        suffix = "".join(f" {k}={v}" for k, v in kv.items())
        logger.info("%s.done ms=%d%s", name, elapsed.ms, suffix)
