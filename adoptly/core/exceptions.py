# adoptly/core/exceptions.py
"""
도메인 예외 정의.

라우트는 이 예외들을 잡아 error_code / HTTP 상태 코드로 변환합니다.
입력 형식 오류는 marshmallow.ValidationError를 그대로 사용합니다.
"""


class AdoptlyError(Exception):
    """서비스 계층에서 발생하는 모든 도메인 예외의 기반 클래스."""
    error_code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


class RequestValidationError(AdoptlyError, ValueError):
    """저장된 값이나 입력값이 처리할 수 없는 형태일 때 발생합니다."""
    error_code = "VALIDATION_ERROR"
    status_code = 400


class EmptyUpdateError(RequestValidationError):
    pass


class InvalidIdentifierError(AdoptlyError, ValueError):
    error_code = "INVALID_IDENTIFIER"
    status_code = 400


class NotFoundError(AdoptlyError, LookupError):
    status_code = 404

    def __init__(self, message: str, error_code: str = "RESOURCE_NOT_FOUND"):
        super().__init__(message)
        self.error_code = error_code


class InsufficientStockError(AdoptlyError):
    """요청 수량이 반려동물의 현재 재고보다 많을 때 발생합니다."""
    error_code = "INSUFFICIENT_STOCK"
    status_code = 400

    def __init__(self, requested: int, available: int):
        super().__init__(
            f"입양 가능 수량이 부족합니다. Requested: {requested}, Available: {available}"
        )
        self.requested = requested
        self.available = available

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"requested": self.requested, "available": self.available})
        return data
