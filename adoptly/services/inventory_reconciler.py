# adoptly/services/inventory_reconciler.py
"""
입양 요청 승인 시 반려동물 재고를 맞추는 로직.

AdoptionRequestService가 상태를 'accepted'로 바꾸기 직전에 호출합니다.
실제 확인/차감은 PetService.reserve_stock이 한 번의 트랜잭션으로 처리하고,
여기서는 그 결과를 도메인 예외 또는 결과 객체로 해석합니다.
"""
import logging
from dataclasses import dataclass

from adoptly.api.pets.services import PetService, StockOutcome
from adoptly.core.exceptions import InsufficientStockError, NotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationResult:
    pet_id: str
    requested: int
    applied: bool
    quantity_before: int
    quantity_after: int
    adopted_count: int

    @property
    def is_adopted(self) -> bool:
        return self.quantity_after == 0


class InventoryReconciler:
    def __init__(self, pet_service: PetService):
        self.pet_service = pet_service

    def reconcile(self, pet_id: str, quantity: int, transaction=None) -> ReconciliationResult:
        """
        요청 수량만큼 재고를 차감합니다.

        - 반려동물이 없으면 NotFoundError
        - 재고가 이미 0이면 아무것도 바꾸지 않고 성공으로 처리 (applied=False)
        - 요청 수량이 재고보다 많으면 InsufficientStockError (재고 변경 없음)
        - 그 외에는 adopted_count 증가, quantity 차감, is_adopted 재계산을 한 번에 기록
        """
        reservation = self.pet_service.reserve_stock(pet_id, quantity, transaction=transaction)

        if reservation.outcome is StockOutcome.PET_NOT_FOUND:
            raise NotFoundError("입양 요청에 연결된 반려동물을 찾을 수 없습니다.", error_code="PET_NOT_FOUND")

        if reservation.outcome is StockOutcome.INSUFFICIENT:
            logger.warning(f"Insufficient stock for pet {pet_id}: requested {quantity}, available {reservation.available}")
            raise InsufficientStockError(requested=quantity, available=reservation.available)

        if reservation.outcome is StockOutcome.SOLD_OUT:
            logger.info(f"Pet {pet_id} is already fully adopted. Nothing to reconcile.")
            return ReconciliationResult(pet_id, quantity, applied=False,
                                        quantity_before=0, quantity_after=0,
                                        adopted_count=reservation.adopted_count)

        logger.info(f"Reconciled pet {pet_id}: quantity {reservation.available} -> {reservation.remaining}, "
                    f"adopted_count -> {reservation.adopted_count}")
        return ReconciliationResult(pet_id, quantity, applied=True,
                                    quantity_before=reservation.available,
                                    quantity_after=reservation.remaining,
                                    adopted_count=reservation.adopted_count)
