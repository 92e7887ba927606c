# adoptly/api/adoption_requests/services.py

import logging
from typing import Optional, Dict, Any, List
from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from adoptly.api.adoption_requests.schemas import AdoptionRequestCreateSchema
from adoptly.core.exceptions import (
    AdoptlyError, EmptyUpdateError, InvalidIdentifierError, NotFoundError, RequestValidationError
)
from adoptly.models.address import Address
from adoptly.models.adoption_request import AdoptionRequest, RequestStatus
from adoptly.services.inventory_reconciler import InventoryReconciler
from adoptly.utils.datetime_utils import DateTimeUtils
from adoptly.utils.id_utils import new_id, is_valid_id

logger = logging.getLogger(__name__)


class AdoptionRequestService:
    """
    입양 요청(adoption_requests) 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 요청 CRUD, 요청자 이메일 기준 조회
    - 상태가 'accepted'로 바뀔 때 InventoryReconciler로 재고를 차감하고,
      재고 차감과 상태 변경을 하나의 트랜잭션으로 커밋합니다.
    """
    def __init__(self,
                 inventory_reconciler: InventoryReconciler,
                 db=None,
                 collection_name: str = 'adoption_requests',
                 allow_reaccept: bool = False):
        self.db = db or firestore.client()
        self.requests_ref = self.db.collection(collection_name)
        self.inventory_reconciler = inventory_reconciler
        self.allow_reaccept = allow_reaccept
        logger.info(f"AdoptionRequestService initialized (allow_reaccept={allow_reaccept}).")

    def create_request(self, payload: Dict[str, Any]) -> AdoptionRequest:
        """
        새 입양 요청을 pending 상태로 저장합니다. user_email은 이 시점의 값으로 고정됩니다.

        payload는 클라이언트 형식(camelCase)이며, 여기서 직접 검증합니다.
        필수 필드가 빠졌거나 quantity가 1 미만이면 marshmallow.ValidationError가 발생합니다.
        """
        request_data = AdoptionRequestCreateSchema().load(payload)
        new_request = AdoptionRequest(
            request_id=new_id(),
            user_id=request_data['user_id'],
            pet_id=request_data['pet_id'],
            address=Address(**request_data['address']),
            quantity=request_data['quantity'],
            user_email=request_data.get('user_email'),
            phone_number=request_data.get('phone_number')
        )
        self.requests_ref.document(new_request.request_id).set(DateTimeUtils.for_firestore(new_request.to_dict()))
        logger.info(f"Adoption request {new_request.request_id} created for pet {new_request.pet_id} "
                    f"(quantity: {new_request.quantity})")
        return new_request

    def list_requests(self, user_email: Optional[str] = None) -> List[AdoptionRequest]:
        """
        입양 요청 목록을 최신순(request_date 내림차순)으로 조회합니다.
        user_email로 필터링했는데 결과가 없으면 NotFoundError를 발생시킵니다.
        """
        query = self.requests_ref
        if user_email:
            query = query.where(filter=FieldFilter("user_email", "==", user_email))
        query = query.order_by("request_date", direction=firestore.Query.DESCENDING)

        requests = [AdoptionRequest.from_dict(doc.to_dict()) for doc in query.stream()]
        if user_email and not requests:
            raise NotFoundError(f"'{user_email}' 사용자의 입양 요청이 없습니다.", error_code="REQUEST_NOT_FOUND")
        return requests

    def get_request(self, request_id: str) -> AdoptionRequest:
        if not is_valid_id(request_id):
            raise InvalidIdentifierError(f"잘못된 입양 요청 ID 형식입니다: {request_id}")
        doc = self.requests_ref.document(request_id).get()
        if not doc.exists:
            raise NotFoundError("해당 ID의 입양 요청을 찾을 수 없습니다.", error_code="REQUEST_NOT_FOUND")
        return AdoptionRequest.from_dict(doc.to_dict())

    def update_request(self, request_id: str, update_data: Dict[str, Any]) -> AdoptionRequest:
        """
        [트랜잭션] 입양 요청을 부분 업데이트합니다 (얕은 필드 교체).

        status가 'accepted'이면 상태를 저장하기 전에 재고를 차감합니다.
        재고 차감이 실패하면 (반려동물 없음, 수량 부족) 트랜잭션 전체가 취소되어
        요청 상태와 반려동물 재고 모두 변경되지 않습니다.
        """
        if not update_data:
            raise EmptyUpdateError("수정할 데이터가 제공되지 않았습니다.")

        request_ref = self.requests_ref.document(request_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _update_in_transaction(transaction):
            snapshot = request_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("수정할 입양 요청을 찾을 수 없습니다.", error_code="REQUEST_NOT_FOUND")

            stored_data = snapshot.to_dict()
            current = AdoptionRequest.from_dict(stored_data)

            # Firestore 트랜잭션은 모든 읽기가 쓰기보다 먼저 와야 합니다 (요청 읽기 -> 반려동물 읽기/쓰기 -> 요청 쓰기).
            reconciliation = None
            if self._should_reconcile(current, update_data):
                quantity = current.quantity
                if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                    raise RequestValidationError(
                        f"저장된 요청 수량이 올바르지 않아 재고를 차감할 수 없습니다: {quantity!r}"
                    )
                reconciliation = self.inventory_reconciler.reconcile(current.pet_id, quantity, transaction=transaction)

            firestore_data = DateTimeUtils.for_firestore(update_data)
            transaction.update(request_ref, firestore_data)
            return AdoptionRequest.from_dict({**stored_data, **firestore_data}), reconciliation

        try:
            updated_request, reconciliation = _update_in_transaction(transaction)
        except AdoptlyError:
            raise
        except Exception as e:
            logger.error(f"Adoption request update transaction failed (request_id: {request_id}): {e}", exc_info=True)
            raise

        logger.info(f"Adoption request {request_id} updated with fields: {list(update_data.keys())}")
        if reconciliation is not None:
            if reconciliation.applied:
                logger.info(f"Inventory reconciled for pet {reconciliation.pet_id}: "
                            f"quantity {reconciliation.quantity_before} -> {reconciliation.quantity_after}, "
                            f"adopted_count {reconciliation.adopted_count}")
            else:
                logger.info(f"Pet {reconciliation.pet_id} is sold out. Request {request_id} accepted without inventory change.")
        return updated_request

    def delete_request(self, request_id: str) -> None:
        """입양 요청을 삭제합니다. 이미 승인되어 차감된 재고는 되돌리지 않습니다."""
        request_ref = self.requests_ref.document(request_id)
        if not request_ref.get().exists:
            raise NotFoundError("삭제할 입양 요청을 찾을 수 없습니다.", error_code="REQUEST_NOT_FOUND")
        request_ref.delete()
        logger.info(f"Adoption request {request_id} deleted")

    def _should_reconcile(self, current: AdoptionRequest, update_data: Dict[str, Any]) -> bool:
        if update_data.get('status') != RequestStatus.ACCEPTED.value:
            return False
        if current.is_accepted and not self.allow_reaccept:
            logger.info(f"Adoption request {current.request_id} is already accepted. Skipping inventory reconciliation.")
            return False
        return True
