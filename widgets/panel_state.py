"""Request bookkeeping shared by the analysis and smart-prompt panels."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PanelStatus(str, Enum):
    HIDDEN = "hidden"
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"
    EMPTY = "empty"


@dataclass
class PanelState:
    """Status of a panel plus the generation of its latest request.

    Every new request (or reset) bumps the generation. A response is applied
    only if it belongs to the current generation, so a slow response for an
    older image never overwrites a newer one.
    """

    status: PanelStatus = PanelStatus.HIDDEN
    error: Optional[str] = None
    generation: int = 0

    def begin(self) -> int:
        self.generation += 1
        self.status = PanelStatus.LOADING
        self.error = None
        return self.generation

    def is_current(self, generation: int) -> bool:
        return generation == self.generation

    def hide(self) -> None:
        self.generation += 1
        self.status = PanelStatus.HIDDEN
        self.error = None

    def fail(self, message: str) -> None:
        self.status = PanelStatus.ERROR
        self.error = message

    def settle(self, has_result: bool) -> None:
        self.status = PanelStatus.READY if has_result else PanelStatus.EMPTY
        self.error = None
