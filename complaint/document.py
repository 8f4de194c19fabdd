"""
Document model for the complaint draft: party fields, three narrative sections, metadata.

The View Coordinator owns the single DraftDocument instance; panels mutate it only
through the methods below.
"""
import itertools
import re
from dataclasses import dataclass, field
from datetime import date as date_cls

SECTION_KEYS = ("purpose", "facts", "reasons")
SECTION_LABELS = {
    "purpose": "고소취지",
    "facts": "범죄사실",
    "reasons": "고소이유",
}

PERSONAL = "personal"
ACCUSED = "accused"
FIELD_GROUPS = (PERSONAL, ACCUSED)
_ID_SUFFIX = re.compile(r"-(\d+)$")

# (payload key, label, placeholder) in display order
PERSONAL_FIELDS = (
    ("name", "성명", "홍길동"),
    ("idNumber", "주민등록번호", "000000-0000000"),
    ("address", "주소", "시/군/구, 도로명"),
    ("job", "직업", "회사원"),
    ("officeAddress", "사무실 주소", "사무실 주소"),
    ("phone", "전화", "010-0000-0000"),
    ("email", "이메일", "example@email.com"),
)
ACCUSED_FIELDS = (
    ("accusedName", "성명", "피고소인 성명"),
    ("accusedPhone", "연락처", "010-0000-0000"),
    ("accusedAddress", "주소", "피고소인 주소"),
)
PAYLOAD_FIELD_KEYS = tuple(k for k, _, _ in PERSONAL_FIELDS + ACCUSED_FIELDS)

DEFAULT_FILING_OFFICE = "○○경찰서장 귀하"


def format_display_date(day: date_cls) -> str:
    return f"{day.year}년 {day.month}월 {day.day}일"


def check_section(section: str) -> str:
    if section not in SECTION_KEYS:
        raise KeyError(f"Unknown section '{section}'. Expected one of {', '.join(SECTION_KEYS)}.")
    return section


@dataclass
class LabeledField:
    id: str
    label: str
    value: str = ""
    placeholder: str = ""

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "value": self.value, "placeholder": self.placeholder}


@dataclass(frozen=True)
class AttachedFile:
    name: str
    extracted_text: str


@dataclass(frozen=True)
class OriginalInput:
    """Prompt and attachment text captured once at generation time, kept for side-by-side comparison."""

    prompt: str
    attached_files: tuple[AttachedFile, ...] = ()

    @classmethod
    def from_response(cls, prompt: str, extracted_files: list[dict] | None) -> "OriginalInput":
        files = tuple(
            AttachedFile(name=str(f.get("name", "")), extracted_text=str(f.get("content", "")))
            for f in (extracted_files or [])
        )
        return cls(prompt=prompt or "", attached_files=files)

    def as_text(self) -> str:
        parts = [self.prompt.strip()] if self.prompt.strip() else []
        for f in self.attached_files:
            parts.append(f"[파일명: {f.name}]\n{f.extracted_text}")
        return "\n\n".join(parts)


@dataclass
class DraftDocument:
    """
    The structured complaint draft. Field ids are unique within their sequence and never
    reused, so a removed field's id cannot resurface on a later add.
    """

    personal_info: list[LabeledField] = field(default_factory=list)
    accused_info: list[LabeledField] = field(default_factory=list)
    purpose: str = ""
    facts: str = ""
    reasons: str = ""
    date: str = ""
    filing_office: str = DEFAULT_FILING_OFFICE
    _id_counter: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False, compare=False)

    # ---- party fields -------------------------------------------------

    def fields(self, group: str) -> list[LabeledField]:
        if group == PERSONAL:
            return self.personal_info
        if group == ACCUSED:
            return self.accused_info
        raise KeyError(f"Unknown field group '{group}'")

    def _next_id(self, group: str) -> str:
        taken = {f.id for f in self.fields(group)}
        prefix = "p" if group == PERSONAL else "a"
        while True:
            candidate = f"{prefix}-{next(self._id_counter)}"
            if candidate not in taken:
                return candidate

    def _advance_ids_past_restored(self) -> None:
        """Restart the counter after the highest restored numeric id so removed ids stay retired."""
        highest = 0
        for f in self.personal_info + self.accused_info:
            match = _ID_SUFFIX.search(f.id)
            if match:
                highest = max(highest, int(match.group(1)))
        self._id_counter = itertools.count(highest + 1)

    def add_field(self, group: str, label: str = "", value: str = "", placeholder: str = "") -> LabeledField:
        new_field = LabeledField(id=self._next_id(group), label=label, value=value, placeholder=placeholder)
        self.fields(group).append(new_field)
        return new_field

    def remove_field(self, group: str, field_id: str) -> bool:
        seq = self.fields(group)
        for i, f in enumerate(seq):
            if f.id == field_id:
                del seq[i]
                return True
        return False

    def get_field(self, group: str, field_id: str) -> LabeledField:
        for f in self.fields(group):
            if f.id == field_id:
                return f
        raise KeyError(f"No field '{field_id}' in {group}")

    def update_field(self, group: str, field_id: str, label: str | None = None, value: str | None = None) -> LabeledField:
        target = self.get_field(group, field_id)
        if label is not None:
            target.label = label
        if value is not None:
            target.value = value
        return target

    # ---- narrative sections -------------------------------------------

    def get_section(self, section: str) -> str:
        return getattr(self, check_section(section))

    def set_section(self, section: str, content: str) -> None:
        setattr(self, check_section(section), content or "")

    def narrative_context(self) -> dict:
        return {key: self.get_section(key) for key in SECTION_KEYS}

    # ---- (de)serialization --------------------------------------------

    @classmethod
    def from_payload(cls, payload: dict, today: date_cls | None = None) -> "DraftDocument":
        """Build a document from a validated create payload (fixed field set, flat keys)."""
        from complaint.utils import plain_text_to_html

        doc = cls(date=format_display_date(today or date_cls.today()))
        for key, label, placeholder in PERSONAL_FIELDS:
            doc.add_field(PERSONAL, label=label, value=str(payload.get(key) or ""), placeholder=placeholder)
        for key, label, placeholder in ACCUSED_FIELDS:
            doc.add_field(ACCUSED, label=label, value=str(payload.get(key) or ""), placeholder=placeholder)
        for key in SECTION_KEYS:
            doc.set_section(key, plain_text_to_html(str(payload.get(key) or "")))
        return doc

    def to_dict(self) -> dict:
        return {
            "personalInfo": [f.to_dict() for f in self.personal_info],
            "accusedInfo": [f.to_dict() for f in self.accused_info],
            "purpose": self.purpose,
            "facts": self.facts,
            "reasons": self.reasons,
            "date": self.date,
            "filingOffice": self.filing_office,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DraftDocument":
        doc = cls(
            purpose=data.get("purpose") or "",
            facts=data.get("facts") or "",
            reasons=data.get("reasons") or "",
            date=data.get("date") or "",
            filing_office=data.get("filingOffice") or DEFAULT_FILING_OFFICE,
        )
        for group, key in ((PERSONAL, "personalInfo"), (ACCUSED, "accusedInfo")):
            for raw in data.get(key) or []:
                fid = str(raw.get("id") or "") or doc._next_id(group)
                if any(f.id == fid for f in doc.fields(group)):
                    fid = doc._next_id(group)
                doc.fields(group).append(
                    LabeledField(
                        id=fid,
                        label=str(raw.get("label") or ""),
                        value=str(raw.get("value") or ""),
                        placeholder=str(raw.get("placeholder") or ""),
                    )
                )
        doc._advance_ids_past_restored()
        return doc
