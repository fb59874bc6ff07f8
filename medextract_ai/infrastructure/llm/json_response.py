"""LLM 응답에서 JSON 객체를 꺼내는 유틸리티."""

import json
import re
from typing import Any

# 마크다운 코드블록이나 설명 문장이 섞여도 첫 '{'부터 마지막 '}'까지를 사용
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json_object(content: str) -> dict[str, Any]:
    """응답 텍스트에서 JSON 객체를 파싱합니다.

    Args:
        content: LLM 응답 텍스트

    Returns:
        파싱된 딕셔너리

    Raises:
        ValueError: JSON 객체가 없거나 파싱할 수 없는 경우
    """
    match = _JSON_OBJECT.search(content)
    if not match:
        raise ValueError("응답에서 JSON 객체를 찾을 수 없습니다")

    data = json.loads(match.group(0))
    if not isinstance(data, dict):
        raise ValueError("응답 JSON이 객체 형식이 아닙니다")
    return data
