"""
Unit tests for the DraftDocument model.
"""
from datetime import date

import pytest

from complaint.document import (
    ACCUSED,
    ACCUSED_FIELDS,
    PERSONAL,
    PERSONAL_FIELDS,
    DraftDocument,
    OriginalInput,
)


class TestFromPayload:
    def test_fixed_field_set(self):
        doc = DraftDocument.from_payload({"name": "홍길동", "unexpected": "x"}, today=date(2024, 3, 5))
        assert [f.label for f in doc.personal_info] == [label for _, label, _ in PERSONAL_FIELDS]
        assert [f.label for f in doc.accused_info] == [label for _, label, _ in ACCUSED_FIELDS]
        assert doc.personal_info[0].value == "홍길동"
        assert doc.date == "2024년 3월 5일"

    def test_sections_become_editor_html(self):
        doc = DraftDocument.from_payload({"facts": "첫 문단\n\n둘째 문단"})
        assert doc.facts == "<p>첫 문단</p><p>둘째 문단</p>"
        assert doc.purpose == "<p><br></p>"


class TestFields:
    def test_ids_unique_and_never_reused(self):
        doc = DraftDocument()
        first = doc.add_field(PERSONAL, label="a")
        second = doc.add_field(PERSONAL, label="b")
        doc.remove_field(PERSONAL, second.id)
        third = doc.add_field(PERSONAL, label="c")
        ids = [f.id for f in doc.personal_info]
        assert len(ids) == len(set(ids))
        assert third.id not in (first.id, second.id)

    def test_add_appends_in_display_order(self, document):
        added = document.add_field(ACCUSED, label="직업", value="무직")
        assert document.accused_info[-1] is added

    def test_update_in_place(self, document):
        target = document.personal_info[1]
        document.update_field(PERSONAL, target.id, value="900101-1111111")
        assert document.personal_info[1].value == "900101-1111111"
        assert document.personal_info[1].label == target.label

    def test_remove_unknown_returns_false(self, document):
        assert document.remove_field(PERSONAL, "missing") is False

    def test_unknown_group(self, document):
        with pytest.raises(KeyError):
            document.add_field("witness")


class TestSections:
    def test_set_section_touches_only_target(self, document):
        before = document.narrative_context()
        document.set_section("facts", "<p>new</p>")
        assert document.facts == "<p>new</p>"
        assert document.purpose == before["purpose"]
        assert document.reasons == before["reasons"]

    def test_unknown_section(self, document):
        with pytest.raises(KeyError):
            document.set_section("summary", "x")


def test_dict_round_trip_keeps_ids(document):
    restored = DraftDocument.from_dict(document.to_dict())
    assert [f.id for f in restored.personal_info] == [f.id for f in document.personal_info]
    assert restored.facts == document.facts
    assert restored.add_field(PERSONAL).id not in {f.id for f in document.personal_info}



def test_restored_document_never_reissues_removed_id(document):
    restored = DraftDocument.from_dict(document.to_dict())
    removed = restored.personal_info[-1].id
    ever_issued = {f.id for f in restored.personal_info + restored.accused_info}
    assert restored.remove_field(PERSONAL, removed)
    assert restored.add_field(PERSONAL).id not in ever_issued
    assert restored.add_field(ACCUSED).id not in ever_issued


def test_original_input_text():
    original = OriginalInput.from_response("요청", [{"name": "a.pdf", "content": "본문"}])
    assert original.attached_files[0].name == "a.pdf"
    assert "[파일명: a.pdf]\n본문" in original.as_text()
