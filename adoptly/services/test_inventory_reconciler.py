# adoptly/services/test_inventory_reconciler.py
"""
재고 조정기(InventoryReconciler) 테스트

사용법: python -m pytest adoptly/services/test_inventory_reconciler.py -v
"""

import pytest

from adoptly.core.exceptions import InsufficientStockError, NotFoundError


def _stock(pet_service, pet_id):
    pet = pet_service.find_by_id(pet_id)
    return pet.quantity, pet.adopted_count, pet.is_adopted


def test_partial_acceptance_decrements_stock(pet_service, reconciler, make_pet):
    """재고 일부 차감: quantity 감소, adopted_count 증가, is_adopted 유지"""
    pet = make_pet(quantity=3)

    result = reconciler.reconcile(pet.pet_id, 2)

    assert result.applied is True
    assert result.quantity_before == 3
    assert result.quantity_after == 1
    assert result.adopted_count == 2
    assert _stock(pet_service, pet.pet_id) == (1, 2, False)


def test_exact_quantity_marks_pet_adopted(pet_service, reconciler, make_pet):
    """요청 수량 == 재고이면 재고 0, is_adopted True"""
    pet = make_pet(quantity=2)

    result = reconciler.reconcile(pet.pet_id, 2)

    assert result.is_adopted is True
    assert _stock(pet_service, pet.pet_id) == (0, 2, True)


def test_sold_out_pet_is_a_noop(pet_service, reconciler, make_pet):
    """재고 0인 반려동물은 아무 필드도 바뀌지 않고 성공으로 처리"""
    pet = make_pet(quantity=0)
    pet_service.update_pet(pet.pet_id, {'adopted_count': 4, 'is_adopted': True})

    result = reconciler.reconcile(pet.pet_id, 1)

    assert result.applied is False
    assert _stock(pet_service, pet.pet_id) == (0, 4, True)


def test_insufficient_stock_leaves_pet_unchanged(pet_service, reconciler, make_pet):
    """요청 수량 > 재고이면 InsufficientStockError, 반려동물 문서는 그대로"""
    pet = make_pet(quantity=2)

    with pytest.raises(InsufficientStockError) as exc_info:
        reconciler.reconcile(pet.pet_id, 5)

    assert exc_info.value.requested == 5
    assert exc_info.value.available == 2
    assert "Requested: 5, Available: 2" in exc_info.value.message
    assert _stock(pet_service, pet.pet_id) == (2, 0, False)


def test_missing_pet_raises_not_found(reconciler):
    with pytest.raises(NotFoundError):
        reconciler.reconcile("00000000-0000-4000-8000-000000000000", 1)


def test_adopted_count_never_decreases_and_quantity_never_negative(pet_service, reconciler, make_pet):
    """연속 승인/실패 시나리오에서 adopted_count 단조 증가, quantity >= 0 유지"""
    pet = make_pet(quantity=5)
    previous_adopted = 0

    for requested in [2, 4, 1, 3, 2, 1, 1]:
        try:
            reconciler.reconcile(pet.pet_id, requested)
        except InsufficientStockError:
            pass
        quantity, adopted_count, is_adopted = _stock(pet_service, pet.pet_id)
        assert quantity >= 0
        assert adopted_count >= previous_adopted
        assert quantity + adopted_count == 5
        previous_adopted = adopted_count

    assert _stock(pet_service, pet.pet_id) == (0, 5, True)


def test_reconcile_joins_caller_transaction(fake_db, pet_service, reconciler, make_pet):
    """호출자가 넘긴 트랜잭션에 쓰기를 버퍼링하고, 커밋 전에는 반영하지 않음"""
    pet = make_pet(quantity=3)
    transaction = fake_db.transaction()

    reconciler.reconcile(pet.pet_id, 1, transaction=transaction)
    assert _stock(pet_service, pet.pet_id) == (3, 0, False)

    transaction.commit()
    assert _stock(pet_service, pet.pet_id) == (2, 1, False)
