from datetime import date

from cndes.core.entities.document import Attachment, Document
from cndes.infrastructure.rules.document_rules import DocumentRulesEngine


def _valid(**overrides):
    fields = dict(
        type="Entrada",
        registration_date=date(2026, 1, 15),
        doc_number="MIN-HAC-2026/054",
        origin="Ministerio de Hacienda",
        destination="Secretaría General",
        summary="Anteproyecto de presupuesto",
    )
    fields.update(overrides)
    return Document(**fields)


def _rule_ids(result):
    return {v.rule_id for v in result.violations}


def test_valid_entrada_passes():
    result = DocumentRulesEngine().apply(_valid())
    assert result.is_valid
    assert result.rules_passed == result.rules_total == 5


def test_entrada_requires_number():
    result = DocumentRulesEngine().apply(_valid(doc_number="  "))
    assert _rule_ids(result) == {"DOC_NUMBER_REQUIRED"}
    assert result.violations[0].field == "docNumber"


def test_salida_and_interno_do_not_need_a_number():
    engine = DocumentRulesEngine()
    assert engine.apply(_valid(type="Salida", doc_number="")).is_valid
    assert engine.apply(_valid(type="Interno", doc_number="")).is_valid


def test_unknown_type_and_status():
    result = DocumentRulesEngine().apply(_valid(type="Fax", status="Archivado"))
    assert _rule_ids(result) == {"TYPE_VALID", "STATUS_VALID"}


def test_every_missing_field_is_reported():
    result = DocumentRulesEngine().apply(_valid(registration_date=None, origin="", destination=" ", summary=""))
    assert [v.field for v in result.violations] == ["registrationDate", "origin", "destination", "summary"]
    assert result.rules_failed == 1


def test_attachment_without_name():
    doc = _valid(attachments=[Attachment(name="ok.pdf"), Attachment(name="")])
    result = DocumentRulesEngine().apply(doc)
    assert [v.field for v in result.violations] == ["attachments[1].name"]
