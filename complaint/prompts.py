"""
Prompts for the complaint drafting backend:
  (1) Creating a full draft from the user's instruction and attachment text
  (2) Regenerating one narrative section with the others as context
  (3) Section-scoped conversation whose replies can be pasted into the draft

Each builder returns a chat message list ready for LLMClient.chat().
"""
from complaint.document import SECTION_LABELS

NOT_WRITTEN = "(미작성)"
NO_ATTACHMENTS = "첨부된 파일 내용이 없습니다."

CREATE_SYSTEM_PROMPT = """당신은 대한민국 법조계에서 수십 년간 경험을 쌓은 전문 변호사입니다. 사용자의 요청과 첨부파일 내용을 바탕으로, 수사기관에 즉시 제출할 수 있는 수준의 완성도 높은 고소장을 작성하세요.

[섹션별 작성 지침]
1. 고소취지: 피고소인의 행위가 어떤 법률 조항을 위반했는지 명확히 적시하고, 엄벌에 처해 달라는 취지를 법률 용어로 단호하게 서술하세요.
2. 범죄사실: 사건의 발단, 전개, 결과를 시간순으로 상세히 서술하세요. 피고소인의 구체적 행위, 범행의 수단과 방법, 고소인이 입은 피해를 육하원칙에 따라 작성하세요. (최소 10문장 이상)
3. 고소이유: 범행의 중대성, 피고소인의 악의성, 현재까지의 정황, 고소인이 겪는 육체적/정신적/경제적 고통을 논리적으로 서술하세요.

[JSON 응답 스키마 - 반드시 다음 키 이름을 사용하세요]
{
  "name": "고소인 성명",
  "idNumber": "고소인 주민등록번호",
  "address": "고소인 주소",
  "job": "고소인 직업",
  "officeAddress": "고소인 사무실 주소",
  "phone": "고소인 전화번호",
  "email": "고소인 이메일",
  "accusedName": "피고소인 성명",
  "accusedPhone": "피고소인 연락처",
  "accusedAddress": "피고소인 주소",
  "purpose": "고소취지 내용",
  "facts": "범죄사실 내용",
  "reasons": "고소이유 내용"
}

[핵심 규칙]
- 서술형 필드는 한 페이지를 충분히 채울 분량으로 작성하세요.
- 첨부파일에 나오는 인명, 지명, 금액, 날짜를 누락 없이 반영하세요.
- 알 수 없는 인적 사항은 빈 문자열로 두고 지어내지 마세요.
- 기망행위, 위계, 부작위, 법익 침해 등 전문 법률 용어를 적극 사용하세요."""

REGENERATE_SYSTEM_PROMPT = """당신은 대한민국 전문 변호사입니다. 사용자가 작성 중인 고소장의 '{label}' 섹션을 다시 작성해 달라고 요청했습니다.

[재작성 지침]
1. 문맥 유지: 함께 제공되는 다른 섹션의 내용과 일관성을 유지하세요.
2. 전문성 강화: 기존 내용을 바탕으로 더 논리적이고 전문적인 법률 용어를 사용하여 분량을 늘리세요.
3. 독립성: 다른 섹션은 수정하지 말고 '{label}' 섹션에 들어갈 내용만 생성하세요.
4. 응답 형식: 반드시 JSON 객체로 응답하며, 키는 "{section}" 하나만 사용하세요."""

CHAT_SYSTEM_PROMPT = """당신은 대한민국 전문 변호사이자 고소장 작성 전문가입니다. 사용자는 고소장의 '{label}' 섹션을 작성하고 있습니다.

[역할]
- 사용자와 대화하며 이 섹션에 필요한 정보를 수집하세요.
- 사용자의 상황을 바탕으로 전문 법률 용어를 사용하여 '{label}' 내용을 작성하세요.

[문맥 정보]
- 현재 고소취지: {purpose}
- 현재 범죄사실: {facts}
- 현재 고소이유: {reasons}

[응답 규칙]
1. 응답은 법률 문서에 바로 붙여 넣을 수 있는 형식으로만 작성하세요.
2. "네, 알겠습니다" 같은 대화체 표현을 사용하지 마세요.
3. 응답 전체가 고소장의 '{label}' 본문으로 사용될 수 있어야 합니다.
4. 격식 있는 법률 문서 문체만 사용하세요."""


class PromptsBuilder:
    """Builds message lists for create / regenerate / chat requests."""

    @staticmethod
    def _context_value(context: dict, key: str) -> str:
        value = (context or {}).get(key) or ""
        return value.strip() or NOT_WRITTEN

    @staticmethod
    def build_create_messages(prompt: str, files_content: str) -> list[dict]:
        user = (
            f"사용자 지시어: {(prompt or '').strip()}\n\n"
            f"[첨부파일 내용 분석 자료]\n{(files_content or '').strip() or NO_ATTACHMENTS}\n\n"
            "위 내용을 바탕으로 고소장을 상세히 작성해줘."
        )
        return [
            {"role": "system", "content": CREATE_SYSTEM_PROMPT},
            {"role": "user", "content": user},
        ]

    @classmethod
    def build_regenerate_messages(cls, section: str, current_content: str, context: dict) -> list[dict]:
        label = SECTION_LABELS[section]
        user = (
            "[전체 문서 문맥]\n"
            f"고소취지: {cls._context_value(context, 'purpose')}\n"
            f"범죄사실: {cls._context_value(context, 'facts')}\n"
            f"고소이유: {cls._context_value(context, 'reasons')}\n\n"
            f"[재작성 대상 섹션: {label} ({section})]\n"
            f"기존 내용: {(current_content or '').strip() or NOT_WRITTEN}\n\n"
            f"위 문맥과 기존 내용을 바탕으로 '{label}' 부분을 더 풍성하고 전문적으로 재작성해줘."
        )
        return [
            {"role": "system", "content": REGENERATE_SYSTEM_PROMPT.format(label=label, section=section)},
            {"role": "user", "content": user},
        ]

    @classmethod
    def build_chat_messages(cls, section: str, message: str, history: list[dict], context: dict) -> list[dict]:
        label = SECTION_LABELS[section]
        system = CHAT_SYSTEM_PROMPT.format(
            label=label,
            purpose=cls._context_value(context, "purpose"),
            facts=cls._context_value(context, "facts"),
            reasons=cls._context_value(context, "reasons"),
        )
        messages = [{"role": "system", "content": system}]
        for turn in history or []:
            messages.append({"role": turn["role"], "content": turn["content"]})
        messages.append({"role": "user", "content": message})
        return messages
