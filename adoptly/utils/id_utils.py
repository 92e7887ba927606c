# adoptly/utils/id_utils.py
import uuid


def new_id() -> str:
    """새 문서 ID(UUID4 문자열)를 생성합니다."""
    return str(uuid.uuid4())


def is_valid_id(value) -> bool:
    """문서 ID가 UUID 형식인지 확인합니다."""
    if not isinstance(value, str) or not value:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True
