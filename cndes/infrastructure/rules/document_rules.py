"""
Document Rules Engine.

Validates a submission before anything is stored:
- Document type (Entrada / Salida / Interno)
- Required fields (registration date, origin, destination, summary)
- Caller-supplied number for Entrada documents
- Known status
- Attachment descriptors carry a name
"""

from typing import Callable, List, Tuple

from cndes.core.entities.document import DocStatus, DocType, Document
from cndes.core.interfaces.rules_engine import IRulesEngine, RulesResult, RuleViolation

# (field, detail)
Finding = Tuple[str, str]

VALID_STATUSES = {s.value for s in DocStatus}


class DocumentRulesEngine(IRulesEngine):
    """
    Registry validation, 5 rules:
    1. Document type
    2. Required fields
    3. Entrada number
    4. Status
    5. Attachment names
    """

    RULES_VERSION = "registry-v1.0"

    def __init__(self):
        self._rules: List[Tuple[str, Callable[[Document], List[Finding]]]] = [
            ("TYPE_VALID", self._rule_type),
            ("REQUIRED_FIELDS", self._rule_required_fields),
            ("DOC_NUMBER_REQUIRED", self._rule_entrada_number),
            ("STATUS_VALID", self._rule_status),
            ("ATTACHMENT_NAME", self._rule_attachment_names),
        ]

    def apply(self, document: Document) -> RulesResult:
        violations = []
        failed = set()

        for rule_id, rule_fn in self._rules:
            for field, detail in rule_fn(document):
                violations.append(RuleViolation(rule_id=rule_id, field=field, detail=detail))
                failed.add(rule_id)

        total = len(self._rules)
        return RulesResult(
            rules_passed=total - len(failed),
            rules_failed=len(failed),
            rules_total=total,
            violations=violations,
            rules_version=self.RULES_VERSION,
        )

    # ── Rules (each returns a list of (field, detail) tuples) ───────

    def _rule_type(self, doc: Document) -> List[Finding]:
        if not doc.type:
            return [("type", "type is required")]
        if doc.doc_type is None:
            allowed = ", ".join(t.value for t in DocType)
            return [("type", f"Unknown type {doc.type!r}, expected one of: {allowed}")]
        return []

    def _rule_required_fields(self, doc: Document) -> List[Finding]:
        v = []
        if doc.registration_date is None:
            v.append(("registrationDate", "registrationDate is required"))
        for field, value in (("origin", doc.origin), ("destination", doc.destination), ("summary", doc.summary)):
            if not (value or "").strip():
                v.append((field, f"{field} is required"))
        return v

    def _rule_entrada_number(self, doc: Document) -> List[Finding]:
        if doc.doc_type is DocType.ENTRADA and not (doc.doc_number or "").strip():
            return [("docNumber", "docNumber is required for Entrada documents")]
        return []

    def _rule_status(self, doc: Document) -> List[Finding]:
        if doc.status not in VALID_STATUSES:
            allowed = ", ".join(sorted(VALID_STATUSES))
            return [("status", f"Unknown status {doc.status!r}, expected one of: {allowed}")]
        return []

    def _rule_attachment_names(self, doc: Document) -> List[Finding]:
        return [
            (f"attachments[{i}].name", "Attachment name is required")
            for i, a in enumerate(doc.attachments)
            if not (a.name or "").strip()
        ]
