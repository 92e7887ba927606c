# conftest.py
"""
pytest 공용 픽스처

실제 Firestore 대신 메모리 기반 테스트 더블을 주입합니다.
firestore.transactional은 함수 실행 후 버퍼된 쓰기를 한 번에 커밋하는 래퍼로 바꿔,
함수 도중 예외가 나면 어떤 쓰기도 반영되지 않는 트랜잭션 동작을 흉내냅니다.
트랜잭션 안에서 읽은 문서가 커밋 전에 다른 쓰기로 바뀌면 Aborted를 던지고
실제 클라이언트처럼 함수 전체를 다시 실행합니다.
"""
import copy
import functools
import uuid

import pytest
from firebase_admin import firestore
from google.api_core.exceptions import Aborted, NotFound
from google.cloud.firestore_v1.transforms import Increment

from adoptly import create_app
from adoptly.api.adoption_requests.services import AdoptionRequestService
from adoptly.api.pets.services import PetService
from adoptly.services.inventory_reconciler import InventoryReconciler


def _get_path(data, field_path):
    value = data
    for part in field_path.split('.'):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def _apply_update(current, updates):
    result = copy.deepcopy(current)
    for key, value in updates.items():
        if isinstance(value, Increment):
            result[key] = (result.get(key) or 0) + value.value
        else:
            result[key] = copy.deepcopy(value)
    return result


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentReference:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    @property
    def version(self):
        return self._collection._versions.get(self.id, 0)

    def get(self, transaction=None):
        if transaction is not None:
            transaction.record_read(self)
        return FakeSnapshot(self, self._collection._docs.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._collection._docs:
            self._collection._docs[self.id] = _apply_update(self._collection._docs[self.id], data)
        else:
            self._collection._docs[self.id] = _apply_update({}, data)
        self._bump_version()

    def update(self, data):
        if self.id not in self._collection._docs:
            raise NotFound(f"No document to update: {self.id}")
        self._collection._docs[self.id] = _apply_update(self._collection._docs[self.id], data)
        self._bump_version()

    def delete(self):
        self._collection._docs.pop(self.id, None)
        self._bump_version()

    def _bump_version(self):
        self._collection._versions[self.id] = self.version + 1


class FakeQuery:
    def __init__(self, collection, filters=(), orders=(), limit_count=None):
        self._collection = collection
        self._filters = list(filters)
        self._orders = list(orders)
        self._limit = limit_count

    def where(self, field_path=None, op_string=None, value=None, *, filter=None):
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        if op_string != '==':
            raise NotImplementedError(f"Unsupported operator in fake query: {op_string}")
        return FakeQuery(self._collection, self._filters + [(field_path, value)], self._orders, self._limit)

    def order_by(self, field_path, direction='ASCENDING'):
        return FakeQuery(self._collection, self._filters, self._orders + [(field_path, direction)], self._limit)

    def limit(self, count):
        return FakeQuery(self._collection, self._filters, self._orders, count)

    def stream(self, transaction=None):
        items = [
            (doc_id, data) for doc_id, data in self._collection._docs.items()
            if all(_get_path(data, path) == value for path, value in self._filters)
        ]
        for field_path, direction in reversed(self._orders):
            items = [item for item in items if _get_path(item[1], field_path) is not None]
            items.sort(key=lambda item: _get_path(item[1], field_path),
                       reverse=direction == firestore.Query.DESCENDING)
        if self._limit is not None:
            items = items[:self._limit]
        for doc_id, data in items:
            yield FakeSnapshot(FakeDocumentReference(self._collection, doc_id), data)

    def get(self, transaction=None):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def __init__(self, name):
        self.name = name
        self._docs = {}
        self._versions = {}
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocumentReference(self, doc_id or uuid.uuid4().hex)


class FakeTransaction:
    """읽은 문서 버전을 기록하고, 커밋 시 바뀐 문서가 있으면 Aborted를 던지는 트랜잭션 더블"""

    def __init__(self, max_attempts=5):
        self.max_attempts = max_attempts
        self._reads = {}
        self._writes = []
        self.committed = False

    def record_read(self, reference):
        key = (reference._collection.name, reference.id)
        self._reads.setdefault(key, (reference, reference.version))

    def set(self, reference, data, merge=False):
        self._writes.append(lambda: reference.set(data, merge=merge))

    def update(self, reference, data):
        self._writes.append(lambda: reference.update(data))

    def delete(self, reference):
        self._writes.append(reference.delete)

    def commit(self):
        for reference, version in self._reads.values():
            if reference.version != version:
                self.reset()
                raise Aborted(f"Document changed during transaction: {reference.id}")
        for write in self._writes:
            write()
        self.reset()
        self.committed = True

    def reset(self):
        self._reads = {}
        self._writes = []


class FakeFirestoreClient:
    def __init__(self):
        self._collections = {}
        self.transactions = []

    def collection(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]

    def transaction(self):
        transaction = FakeTransaction()
        self.transactions.append(transaction)
        return transaction


def fake_transactional(func):
    """firestore.transactional처럼 충돌(Aborted) 시 함수 전체를 다시 실행"""
    @functools.wraps(func)
    def wrapper(transaction, *args, **kwargs):
        for attempt in range(1, transaction.max_attempts + 1):
            try:
                result = func(transaction, *args, **kwargs)
                transaction.commit()
                return result
            except Aborted:
                transaction.reset()
                if attempt == transaction.max_attempts:
                    raise
            except Exception:
                transaction.reset()
                raise
    return wrapper


@pytest.fixture
def fake_db(monkeypatch):
    monkeypatch.setattr(firestore, "transactional", fake_transactional)
    return FakeFirestoreClient()


@pytest.fixture
def pet_service(fake_db):
    return PetService(db=fake_db)


@pytest.fixture
def reconciler(pet_service):
    return InventoryReconciler(pet_service=pet_service)


@pytest.fixture
def request_service(fake_db, reconciler):
    return AdoptionRequestService(inventory_reconciler=reconciler, db=fake_db)


@pytest.fixture
def app(fake_db):
    return create_app(config_name='testing', db=fake_db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_pet(pet_service):
    """재고 수량만 지정해 반려동물을 등록하는 헬퍼."""
    def _make_pet(quantity=1, **overrides):
        data = {
            'name': 'Bori',
            'category': 'dog',
            'address': {'district': 'Dhaka', 'division': 'Dhaka'},
            'quantity': quantity,
        }
        data.update(overrides)
        return pet_service.create_pet(data)
    return _make_pet
