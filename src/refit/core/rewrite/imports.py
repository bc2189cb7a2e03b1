"""Import block injection."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .rules import GuardMarker, ImportBlock


class InjectionStatus(str, Enum):
    INJECTED = "injected"
    ALREADY_PRESENT = "already-present"
    ANCHOR_NOT_FOUND = "anchor-not-found"


@dataclass(frozen=True)
class InjectionResult:
    content: str
    status: InjectionStatus
    # Offsets of the inserted text in ``content`` (INJECTED only).
    span: Optional[Tuple[int, int]] = None

    @property
    def injected(self) -> bool:
        return self.status is InjectionStatus.INJECTED


def inject_imports(content: str, block: ImportBlock, guard: GuardMarker) -> InjectionResult:
    """Ensure ``block`` is present in ``content`` exactly once.

    - signature already present: content returned as is, ``ALREADY_PRESENT``
    - guard found: block inserted right after the guard match (which ends
      with its line break), ``INJECTED``
    - guard missing: content returned as is, ``ANCHOR_NOT_FOUND``; callers
      decide how to surface it
    """
    if block.is_present(content):
        return InjectionResult(content=content, status=InjectionStatus.ALREADY_PRESENT)

    match = guard.search(content)
    if match is None:
        return InjectionResult(content=content, status=InjectionStatus.ANCHOR_NOT_FOUND)

    insert_at = match.end()
    text = block.render()
    return InjectionResult(
        content=content[:insert_at] + text + content[insert_at:],
        status=InjectionStatus.INJECTED,
        span=(insert_at, insert_at + len(text)),
    )


__all__ = ["InjectionStatus", "InjectionResult", "inject_imports"]
