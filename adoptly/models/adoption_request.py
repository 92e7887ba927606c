# adoptly/models/adoption_request.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from adoptly.models.address import Address
from adoptly.utils.datetime_utils import DateTimeUtils


class RequestStatus(Enum):
    """시스템이 의미를 부여하는 입양 요청 상태. 이 외의 문자열도 그대로 저장됩니다."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class AdoptionRequest:
    """
    Firestore 'adoption_requests' 컬렉션의 문서 구조.

    user_email은 생성 시점에 복사해 두는 비정규화 필드이며 이후 갱신하지 않습니다.
    pet_id, quantity는 생성 후 변경할 수 없습니다.
    status는 Enum이 아닌 문자열로 보관합니다 (자유 형식 상태값 허용).
    """
    request_id: str
    user_id: str
    pet_id: str
    address: Address
    quantity: int = 1
    user_email: Optional[str] = None
    phone_number: Optional[str] = None
    status: str = RequestStatus.PENDING.value
    request_date: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def is_accepted(self) -> bool:
        return self.status == RequestStatus.ACCEPTED.value

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdoptionRequest":
        """Firestore 문서 딕셔너리로부터 인스턴스를 생성합니다."""
        processed_data = DateTimeUtils.from_firestore(dict(data))
        processed_data['address'] = Address.from_dict(processed_data.get('address'))
        known_fields = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in processed_data.items() if k in known_fields})
