from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional

from .lib.command import CmdResult


class Outcome(enum.Enum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ActionResult:
    name: str
    outcome: Outcome
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def from_cmd(cls, name: str, r: CmdResult) -> "ActionResult":
        if r.ok:
            return cls(name, Outcome.OK)
        detail = (r.stderr or "").strip().splitlines()
        return cls(name, Outcome.FAILED, f"exit {r.returncode}" + (f": {detail[-1]}" if detail else ""))

    @classmethod
    def from_flag(cls, name: str, flag: Optional[bool]) -> "ActionResult":
        if flag is None:
            return cls(name, Outcome.UNKNOWN)
        return cls(name, Outcome.OK if flag else Outcome.FAILED)


@dataclass
class StepResult:
    step_id: str
    actions: List[ActionResult] = field(default_factory=list)

    def add(self, action: ActionResult) -> ActionResult:
        self.actions.append(action)
        return action

    def get(self, name: str) -> Optional[ActionResult]:
        for a in self.actions:
            if a.name == name:
                return a
        return None

    @property
    def failed(self) -> List[ActionResult]:
        return [a for a in self.actions if a.outcome is Outcome.FAILED]
