# adoptly/utils/datetime_utils.py
"""
시간 처리를 한 곳에서 담당하는 유틸리티 모듈

- 백엔드 내부 시간은 모두 UTC timezone-aware datetime으로 통일
- Firestore 저장/조회 시 date, naive datetime, Timestamp를 일관되게 변환
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """시간 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> UTC datetime
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터의 시간 필드를 UTC datetime으로 변환

        Firestore의 DatetimeWithNanoseconds도 datetime 하위 클래스이므로
        일반 datetime으로 다시 만들어 반환합니다.
        """
        try:
            if isinstance(obj, datetime):
                if obj.tzinfo is None:
                    obj = obj.replace(tzinfo=timezone.utc)
                obj = obj.astimezone(timezone.utc)
                return datetime.combine(obj.date(), obj.timetz())
            if isinstance(obj, dict):
                return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
            if isinstance(obj, list):
                return [DateTimeUtils.from_firestore(item) for item in obj]
            return obj
        except Exception as e:
            # 변환 실패 시 원본 객체 반환 (로그만 남김)
            logger.error(f"Firestore 읽기 변환 실패: {obj} ({type(obj)}) - {e}")
            return obj
