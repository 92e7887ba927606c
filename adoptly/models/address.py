# adoptly/models/address.py
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class Address:
    """입양 요청과 반려동물 문서에 중첩 저장되는 주소 (district / division)."""
    district: str
    division: str

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Address":
        data = data or {}
        return cls(district=data.get('district', ''), division=data.get('division', ''))
