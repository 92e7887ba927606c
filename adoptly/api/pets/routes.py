# adoptly/api/pets/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from adoptly.core.exceptions import AdoptlyError
from .schemas import PetCreateSchema, PetUpdateSchema, PetResponseSchema

pets_bp = Blueprint('pets_bp', __name__)


def _validation_error(err: ValidationError):
    return jsonify({"error_code": "VALIDATION_ERROR",
                    "message": "입력값이 올바르지 않습니다.",
                    "details": err.messages}), 400


@pets_bp.route('', methods=['POST'])
def create_pet():
    """입양 게시 반려동물 등록 API."""
    pet_service = current_app.services['pets']
    try:
        validated_data = PetCreateSchema().load(request.get_json(silent=True) or {})
        new_pet = pet_service.create_pet(validated_data)
        return jsonify(PetResponseSchema().dump(new_pet.to_dict())), 201
    except ValidationError as err:
        return _validation_error(err)
    except Exception as e:
        logging.error(f"Pet creation API error: {e}", exc_info=True)
        return jsonify({"error_code": "PET_CREATION_FAILED", "message": "반려동물 등록 중 오류가 발생했습니다.", "details": str(e)}), 500


@pets_bp.route('', methods=['GET'])
def list_pets():
    """반려동물 목록 조회 (최신순). ?category= 로 필터링할 수 있습니다."""
    pet_service = current_app.services['pets']
    category = request.args.get('category', None, type=str)
    try:
        pets = pet_service.list_pets(category=category)
        return jsonify(PetResponseSchema(many=True).dump([pet.to_dict() for pet in pets])), 200
    except Exception as e:
        logging.error(f"List pets API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "반려동물 목록 조회 중 오류가 발생했습니다.", "details": str(e)}), 500


@pets_bp.route('/<string:pet_id>', methods=['GET'])
def get_pet(pet_id: str):
    pet_service = current_app.services['pets']
    try:
        pet = pet_service.get_pet(pet_id)
        return jsonify(PetResponseSchema().dump(pet.to_dict())), 200
    except AdoptlyError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logging.error(f"Get pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "반려동물 조회 중 오류가 발생했습니다.", "details": str(e)}), 500


@pets_bp.route('/<string:pet_id>', methods=['PATCH'])
def update_pet(pet_id: str):
    """반려동물 정보를 직접 수정합니다 (부분 업데이트, 재고 보충 포함)."""
    pet_service = current_app.services['pets']
    try:
        update_data = PetUpdateSchema().load(request.get_json(silent=True) or {})
        updated_pet = pet_service.update_pet(pet_id, update_data)
        return jsonify(PetResponseSchema().dump(updated_pet.to_dict())), 200
    except ValidationError as err:
        return _validation_error(err)
    except AdoptlyError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logging.error(f"Update pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "반려동물 수정 중 오류가 발생했습니다.", "details": str(e)}), 500


@pets_bp.route('/<string:pet_id>', methods=['DELETE'])
def delete_pet(pet_id: str):
    pet_service = current_app.services['pets']
    try:
        pet_service.delete_pet(pet_id)
        return jsonify({"message": "반려동물이 삭제되었습니다.", "deletedId": pet_id}), 200
    except AdoptlyError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        logging.error(f"Delete pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "반려동물 삭제 중 오류가 발생했습니다.", "details": str(e)}), 500
