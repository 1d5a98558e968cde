"""Base classes for policy checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List

from ..models import Finding, WorkspaceModel
from ..policy import CheckPolicy, EffectiveConfig


class Check(ABC):
    """Contract for checks that emit findings from the workspace model.

    Subclasses set ``check_id`` and implement :meth:`inspect`. Checks read
    the model and policy only and never share state, so the engine may run
    them in any order.
    """

    check_id: str = ""

    def run(self, model: WorkspaceModel, config: EffectiveConfig) -> List[Finding]:
        """Return findings for ``model``; a disabled or absent policy yields none."""
        policy = config.check_policy(self.check_id)
        if policy is None:
            return []
        return list(self.inspect(model, policy))

    @abstractmethod
    def inspect(self, model: WorkspaceModel, policy: CheckPolicy) -> Iterable[Finding]:
        """Produce findings under an enabled ``policy``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.check_id!r})"
