from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator

# NOTE: For now this is process-global. If threading is introduced,
# consider switching to contextvars or threading.local.
_evaluation_depth: int = 0


def get_evaluation_depth() -> int:
    return _evaluation_depth


@contextmanager
def nested_evaluation() -> Iterator[int]:
    """Count one level of evaluator nesting for the duration of the block."""
    global _evaluation_depth
    _evaluation_depth += 1
    try:
        yield _evaluation_depth
    finally:
        _evaluation_depth -= 1
