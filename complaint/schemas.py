"""
Pydantic schemas for the /api/analyze wire format and for validating LLM JSON output.

The UI never reads raw response dicts: every payload passes through these models at
the service boundary, where missing keys are defaulted and unknown keys dropped.
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from complaint.document import SECTION_KEYS

RequestType = Literal["create", "regenerate", "chat"]


class FilePayload(BaseModel):
    """One attached file as sent by the client (base64 body)."""

    model_config = ConfigDict(extra="ignore")

    name: str
    type: str = ""
    data: str = ""


class ChatTurn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str = "user"
    content: str = ""

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v: str) -> str:
        return "assistant" if (v or "").lower() in ("ai", "assistant") else "user"


class SectionContext(BaseModel):
    model_config = ConfigDict(extra="ignore")

    purpose: str = ""
    facts: str = ""
    reasons: str = ""


class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: RequestType = "create"
    prompt: str = ""
    files: List[FilePayload] = Field(default_factory=list)
    section: str = ""
    current_content: str = Field(default="", alias="currentContent")
    context: SectionContext = Field(default_factory=SectionContext)
    message: str = ""
    history: List[ChatTurn] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_mode_inputs(self) -> "AnalyzeRequest":
        if self.type == "create" and not self.prompt.strip() and not self.files:
            raise ValueError("prompt or files required for create")
        if self.type in ("regenerate", "chat") and self.section not in SECTION_KEYS:
            raise ValueError(f"section must be one of {', '.join(SECTION_KEYS)}")
        if self.type == "chat" and not self.message.strip():
            raise ValueError("message required for chat")
        return self


class DraftPayload(BaseModel):
    """
    Fixed field set of a created draft. Every key is present after validation;
    values the model omitted default to empty strings and extra keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    idNumber: str = ""
    address: str = ""
    job: str = ""
    officeAddress: str = ""
    phone: str = ""
    email: str = ""
    accusedName: str = ""
    accusedPhone: str = ""
    accusedAddress: str = ""
    purpose: str = ""
    facts: str = ""
    reasons: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_to_text(cls, v):
        if v is None:
            return ""
        if isinstance(v, list):
            return "\n".join(str(item) for item in v)
        return v if isinstance(v, str) else str(v)


class ChatReply(BaseModel):
    response: str


class ExtractedFile(BaseModel):
    name: str
    content: str


class AnalyzeResponse(BaseModel):
    """Body returned by POST /api/analyze."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    data: Optional[Dict[str, str]] = None
    extracted_files: Optional[List[ExtractedFile]] = Field(default=None, alias="extractedFiles")
    error: Optional[str] = None
    placeholder: bool = False

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
