"""검사 유형 라벨 정규화.

AI가 추출한 자유 텍스트 라벨을 별칭(coordonance) 테이블과
비교 가능한 형태로 변환합니다. 최선 노력(best-effort) 매칭용이며
인식하지 못한 기호는 조용히 제거됩니다.
"""

import re
import unicodedata

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9\s]")


def remove_accents(text: str) -> str:
    """악센트를 제거하여 기본 라틴 문자로 변환합니다.

    NFD 분해 후 결합 문자를 제거합니다. 분해되지 않는 ``ð``는 ``o``로 치환합니다.
    """
    decomposed = unicodedata.normalize("NFD", text)
    return _COMBINING_MARKS.sub("", decomposed).replace("ð", "o")


def remove_special_characters(text: str) -> str:
    """하이픈은 공백으로 바꾸고 영숫자/공백 외 문자는 제거합니다."""
    return _NON_ALPHANUMERIC.sub("", text.replace("-", " "))


def normalize_label(label: str) -> str:
    """검사 유형 라벨을 정규화합니다.

    소문자 변환 → 아포스트로피 제거 → 악센트 제거 → 특수문자 제거 순서로 적용합니다.

    Examples:
        >>> normalize_label("Échographie Abdomino-Pelvienne")
        'echographie abdomino pelvienne'

    Args:
        label: 원문 라벨

    Returns:
        정규화된 라벨 (멱등)
    """
    lowered = label.lower().replace("'", "")
    return remove_special_characters(remove_accents(lowered))
