"""
Contract: Rules Engine

Applies deterministic business rules to a submitted document
before anything is written. Pure: no I/O, no side effects.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from cndes.core.entities.document import Document


@dataclass
class RuleViolation:
    """A rule the document does not satisfy."""
    rule_id: str              # e.g. "DOC_NUMBER_REQUIRED"
    field: str                # camelCase field name as seen by the client
    detail: str               # e.g. "docNumber is required for Entrada documents"

    def to_dict(self) -> dict:
        return {"ruleId": self.rule_id, "field": self.field, "detail": self.detail}


@dataclass
class RulesResult:
    """Outcome of applying the rules."""
    rules_passed: int
    rules_failed: int
    rules_total: int
    violations: list[RuleViolation] = field(default_factory=list)
    rules_version: str = ""

    @property
    def is_valid(self) -> bool:
        return not self.violations


class IRulesEngine(ABC):
    """
    Port: Rules Engine
    """

    @abstractmethod
    def apply(self, document: Document) -> RulesResult:
        """
        Validates a document.

        Args:
            document: Document as submitted (before numbering and persistence).

        Returns:
            RulesResult with the violations found.
        """
        ...
