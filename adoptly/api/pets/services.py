# adoptly/api/pets/services.py
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, List
from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from adoptly.core.exceptions import EmptyUpdateError, InvalidIdentifierError, NotFoundError
from adoptly.models.address import Address
from adoptly.models.pet import Pet
from adoptly.utils.datetime_utils import DateTimeUtils
from adoptly.utils.id_utils import new_id, is_valid_id

logger = logging.getLogger(__name__)


class StockOutcome(Enum):
    RESERVED = "RESERVED"
    SOLD_OUT = "SOLD_OUT"
    INSUFFICIENT = "INSUFFICIENT"
    PET_NOT_FOUND = "PET_NOT_FOUND"


@dataclass
class StockReservation:
    """reserve_stock 호출 결과. available은 차감 전 재고, remaining은 차감 후 재고."""
    outcome: StockOutcome
    pet_id: str
    requested: int
    available: int = 0
    remaining: int = 0
    adopted_count: int = 0


class PetService:
    """
    입양 대상 반려동물(pets 컬렉션)의 조회/수정과 재고 차감을 담당하는 서비스.

    재고(quantity, adopted_count, is_adopted)는 reserve_stock을 통해서만
    트랜잭션 안에서 '확인 후 차감'되어야 합니다.
    """
    def __init__(self, db=None, collection_name: str = 'pets'):
        self.db = db or firestore.client()
        self.pets_ref = self.db.collection(collection_name)
        logger.info("PetService initialized.")

    def create_pet(self, pet_data: Dict[str, Any]) -> Pet:
        """새 입양 게시 반려동물을 등록합니다. 재고 카운터는 초기값으로 시작합니다."""
        new_pet = Pet(
            pet_id=new_id(),
            name=pet_data['name'],
            category=pet_data['category'],
            address=Address(**pet_data['address']),
            quantity=pet_data.get('quantity', 1),
            breed=pet_data.get('breed'),
            age=pet_data.get('age'),
            gender=pet_data.get('gender'),
            description=pet_data.get('description'),
            image_url=pet_data.get('image_url'),
            owner_email=pet_data.get('owner_email')
        )
        self.pets_ref.document(new_pet.pet_id).set(DateTimeUtils.for_firestore(new_pet.to_dict()))
        logger.info(f"Pet {new_pet.pet_id} created with quantity {new_pet.quantity}")
        return new_pet

    def list_pets(self, category: Optional[str] = None) -> List[Pet]:
        """반려동물 목록을 최신 등록순으로 조회합니다."""
        query = self.pets_ref
        if category:
            query = query.where(filter=FieldFilter("category", "==", category))
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING)
        return [Pet.from_dict(doc.to_dict()) for doc in query.stream()]

    def find_by_id(self, pet_id: str) -> Optional[Pet]:
        doc = self.pets_ref.document(pet_id).get()
        if not doc.exists:
            return None
        return Pet.from_dict(doc.to_dict())

    def get_pet(self, pet_id: str) -> Pet:
        if not is_valid_id(pet_id):
            raise InvalidIdentifierError(f"잘못된 반려동물 ID 형식입니다: {pet_id}")
        pet = self.find_by_id(pet_id)
        if not pet:
            raise NotFoundError("해당 ID의 반려동물을 찾을 수 없습니다.", error_code="PET_NOT_FOUND")
        return pet

    def update_pet(self, pet_id: str, update_data: Dict[str, Any]) -> Pet:
        """
        반려동물 문서를 부분 업데이트합니다.
        값으로 firestore.Increment(n)을 넘기면 같은 호출 안에서 증감과 대입을 함께 적용할 수 있습니다.
        """
        if not update_data:
            raise EmptyUpdateError("수정할 데이터가 제공되지 않았습니다.")

        pet_ref = self.pets_ref.document(pet_id)
        if not pet_ref.get().exists:
            raise NotFoundError("수정할 반려동물을 찾을 수 없습니다.", error_code="PET_NOT_FOUND")

        pet_ref.update(DateTimeUtils.for_firestore(update_data))
        logger.info(f"Pet {pet_id} updated with fields: {list(update_data.keys())}")

        updated_pet = self.find_by_id(pet_id)
        if not updated_pet:
            raise RuntimeError("업데이트된 반려동물 정보를 조회할 수 없습니다.")
        return updated_pet

    def delete_pet(self, pet_id: str) -> None:
        pet_ref = self.pets_ref.document(pet_id)
        if not pet_ref.get().exists:
            raise NotFoundError("삭제할 반려동물을 찾을 수 없습니다.", error_code="PET_NOT_FOUND")
        pet_ref.delete()
        logger.info(f"Pet {pet_id} deleted")

    def reserve_stock(self, pet_id: str, amount: int, transaction=None) -> StockReservation:
        """
        [트랜잭션] 재고가 amount 이상일 때만 amount만큼 차감합니다.

        확인과 쓰기가 하나의 트랜잭션 안에서 일어나므로 동시에 들어온 승인 요청이
        같은 재고 값을 보고 중복 차감하지 않습니다.
        transaction을 넘기면 호출자의 트랜잭션에 참여하고, 없으면 새 트랜잭션을 엽니다.
        """
        if amount < 1:
            raise ValueError(f"차감 수량은 1 이상이어야 합니다: {amount}")

        if transaction is not None:
            return self._reserve_stock(transaction, pet_id, amount)

        transaction = self.db.transaction()

        @firestore.transactional
        def _reserve_in_transaction(transaction):
            return self._reserve_stock(transaction, pet_id, amount)

        return _reserve_in_transaction(transaction)

    def _reserve_stock(self, transaction, pet_id: str, amount: int) -> StockReservation:
        pet_ref = self.pets_ref.document(pet_id)
        snapshot = pet_ref.get(transaction=transaction)
        if not snapshot.exists:
            return StockReservation(StockOutcome.PET_NOT_FOUND, pet_id, amount)

        pet_data = snapshot.to_dict()
        available = max(pet_data.get('quantity') or 0, 0)
        adopted_count = pet_data.get('adopted_count') or 0

        if available == 0:
            return StockReservation(StockOutcome.SOLD_OUT, pet_id, amount,
                                    available=0, remaining=0, adopted_count=adopted_count)
        if amount > available:
            return StockReservation(StockOutcome.INSUFFICIENT, pet_id, amount,
                                    available=available, remaining=available, adopted_count=adopted_count)

        remaining = max(available - amount, 0)
        transaction.update(pet_ref, {
            'adopted_count': firestore.Increment(amount),
            'quantity': remaining,
            'is_adopted': remaining == 0
        })
        return StockReservation(StockOutcome.RESERVED, pet_id, amount,
                                available=available, remaining=remaining,
                                adopted_count=adopted_count + amount)
