# adoptly/api/adoption_requests/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from adoptly.core.exceptions import AdoptlyError
from adoptly.api.adoption_requests.schemas import (
    AdoptionRequestUpdateSchema,
    AdoptionRequestResponseSchema,
    UserRequestsResponseSchema
)

requests_bp = Blueprint('requests_bp', __name__)


def _validation_error(err: ValidationError):
    return jsonify({"error_code": "VALIDATION_ERROR",
                    "message": "입력값이 올바르지 않습니다.",
                    "details": err.messages}), 400


@requests_bp.route('', methods=['POST'])
def create_request():
    """
    새 입양 요청을 생성합니다.
    - 성공 시 pending 상태의 요청을 201 Created와 함께 반환합니다.
    """
    request_service = current_app.services['adoption_requests']
    try:
        new_request = request_service.create_request(request.get_json(silent=True) or {})
        return jsonify(AdoptionRequestResponseSchema().dump(new_request.to_dict())), 201
    except ValidationError as err:
        return _validation_error(err)
    except Exception as e:
        logging.error(f"입양 요청 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "REQUEST_CREATION_FAILED", "message": "입양 요청 생성 중 오류가 발생했습니다.", "details": str(e)}), 500


@requests_bp.route('', methods=['GET'])
def list_requests():
    """전체 입양 요청을 최신순으로 조회합니다."""
    request_service = current_app.services['adoption_requests']
    try:
        requests = request_service.list_requests()
        return jsonify(AdoptionRequestResponseSchema(many=True).dump([r.to_dict() for r in requests])), 200
    except Exception as e:
        logging.error(f"입양 요청 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "입양 요청 목록 조회 중 오류가 발생했습니다.", "details": str(e)}), 500


@requests_bp.route('/user/<string:email>', methods=['GET'])
def list_user_requests(email: str):
    """특정 사용자(이메일)의 입양 요청을 최신순으로 조회합니다. 요청이 없으면 404."""
    request_service = current_app.services['adoption_requests']
    try:
        requests = request_service.list_requests(user_email=email)
        payload = {"total_request": len(requests), "request": [r.to_dict() for r in requests]}
        return jsonify(UserRequestsResponseSchema().dump(payload)), 200
    except AdoptlyError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logging.error(f"사용자 입양 요청 조회 중 오류 발생 (email: {email}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "입양 요청 조회 중 오류가 발생했습니다.", "details": str(e)}), 500


@requests_bp.route('/<string:request_id>', methods=['GET'])
def get_request(request_id: str):
    request_service = current_app.services['adoption_requests']
    try:
        adoption_request = request_service.get_request(request_id)
        return jsonify(AdoptionRequestResponseSchema().dump(adoption_request.to_dict())), 200
    except AdoptlyError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logging.error(f"입양 요청 조회 중 오류 발생 (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "입양 요청 조회 중 오류가 발생했습니다.", "details": str(e)}), 500


@requests_bp.route('/<string:request_id>', methods=['PUT'])
def update_request(request_id: str):
    """
    입양 요청을 부분 수정합니다.
    - status를 'accepted'로 바꾸면 반려동물 재고가 함께 차감됩니다.
    - 재고가 부족하면 400 INSUFFICIENT_STOCK (requested, available 포함)을 반환하고 아무것도 바뀌지 않습니다.
    """
    request_service = current_app.services['adoption_requests']
    try:
        update_data = AdoptionRequestUpdateSchema().load(request.get_json(silent=True) or {})
        updated_request = request_service.update_request(request_id, update_data)
        return jsonify(AdoptionRequestResponseSchema().dump(updated_request.to_dict())), 200
    except ValidationError as err:
        return _validation_error(err)
    except AdoptlyError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logging.error(f"입양 요청 수정 중 오류 발생 (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "REQUEST_UPDATE_FAILED", "message": "입양 요청 수정 중 오류가 발생했습니다.", "details": str(e)}), 500


@requests_bp.route('/<string:request_id>', methods=['DELETE'])
def delete_request(request_id: str):
    """입양 요청을 삭제합니다. 이미 차감된 재고는 복구되지 않습니다."""
    request_service = current_app.services['adoption_requests']
    try:
        request_service.delete_request(request_id)
        return jsonify({"message": "입양 요청이 삭제되었습니다.", "deletedId": request_id}), 200
    except AdoptlyError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logging.error(f"입양 요청 삭제 중 오류 발생 (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "REQUEST_DELETE_FAILED", "message": "입양 요청 삭제 중 오류가 발생했습니다.", "details": str(e)}), 500
