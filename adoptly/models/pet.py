# adoptly/models/pet.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, Dict, Any
import logging

from adoptly.models.address import Address
from adoptly.utils.datetime_utils import DateTimeUtils


@dataclass
class Pet:
    """
    Firestore 'pets' 컬렉션 문서 구조.
    입양 게시글 하나가 여러 마리(quantity)를 나타낼 수 있습니다.

    재고 관련 필드:
    - quantity: 현재 입양 가능한 수. 입양 요청 승인으로만 감소하며 0 미만이 되지 않습니다.
    - adopted_count: 누적 입양 수. 승인으로만 증가합니다.
    - is_adopted: 마지막 승인 처리 시점에 quantity가 0이었는지 여부.
    """
    pet_id: str
    name: str
    category: str
    address: Address
    quantity: int = 1
    adopted_count: int = 0
    is_adopted: bool = False
    breed: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    owner_email: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pet":
        """
        Firestore에서 받은 딕셔너리로부터 Pet 인스턴스를 생성합니다.
        재고 필드가 비어 있거나 음수인 오래된 문서도 안전하게 읽을 수 있도록 보정합니다.
        """
        processed_data = DateTimeUtils.from_firestore(dict(data))
        processed_data['address'] = Address.from_dict(processed_data.get('address'))

        for counter in ('quantity', 'adopted_count'):
            value = processed_data.get(counter)
            if value is None:
                processed_data[counter] = 0
            elif value < 0:
                logging.warning(f"Negative {counter} ({value}) for pet {processed_data.get('pet_id')}. Clamping to 0.")
                processed_data[counter] = 0

        if processed_data.get('is_adopted') is None:
            processed_data['is_adopted'] = False

        known_fields = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in processed_data.items() if k in known_fields})
