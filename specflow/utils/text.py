"""문서 본문 통계 계산 함수."""

import math

WORDS_PER_MINUTE = 200


def word_count(content: str) -> int:
    """공백 기준 단어 수"""
    return len(content.split())


def estimated_read_time(content: str) -> int:
    """예상 읽기 시간 (분, 올림)"""
    return math.ceil(word_count(content) / WORDS_PER_MINUTE)
