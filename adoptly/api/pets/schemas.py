# adoptly/api/pets/schemas.py
from marshmallow import Schema, fields, validate

from adoptly.schemas.address_schema import AddressSchema

PET_GENDERS = ["male", "female", "unknown"]


class PetCreateSchema(Schema):
    """POST /pets 입양 게시 반려동물 등록 요청 스키마."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    category = fields.Str(required=True, validate=validate.Length(min=1, max=30))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    age = fields.Int(allow_none=True, validate=validate.Range(min=0, max=600))
    gender = fields.Str(allow_none=True, validate=validate.OneOf(PET_GENDERS))
    description = fields.Str(allow_none=True, validate=validate.Length(max=2000))
    image_url = fields.URL(data_key="imageUrl", allow_none=True)
    owner_email = fields.Email(data_key="ownerEmail", allow_none=True)
    address = fields.Nested(AddressSchema, required=True,
                            error_messages={"required": "주소(district, division)는 필수입니다."})
    quantity = fields.Int(load_default=1, validate=validate.Range(min=0))


class PetUpdateSchema(Schema):
    """
    PATCH /pets/<pet_id> 직접 수정 스키마 (부분 업데이트용).
    adoptedCount, isAdopted는 입양 승인으로만 바뀌므로 받지 않습니다.
    """
    name = fields.Str(validate=validate.Length(min=1, max=50))
    category = fields.Str(validate=validate.Length(min=1, max=30))
    breed = fields.Str(allow_none=True, validate=validate.Length(max=50))
    age = fields.Int(allow_none=True, validate=validate.Range(min=0, max=600))
    gender = fields.Str(allow_none=True, validate=validate.OneOf(PET_GENDERS))
    description = fields.Str(allow_none=True, validate=validate.Length(max=2000))
    image_url = fields.URL(data_key="imageUrl", allow_none=True)
    address = fields.Nested(AddressSchema)
    quantity = fields.Int(validate=validate.Range(min=0))


class PetResponseSchema(Schema):
    """반려동물 정보 응답 스키마."""
    pet_id = fields.Str(data_key="id", dump_only=True)
    name = fields.Str()
    category = fields.Str()
    breed = fields.Str(allow_none=True)
    age = fields.Int(allow_none=True)
    gender = fields.Str(allow_none=True)
    description = fields.Str(allow_none=True)
    image_url = fields.Str(data_key="imageUrl", allow_none=True)
    owner_email = fields.Str(data_key="ownerEmail", allow_none=True)
    address = fields.Nested(AddressSchema)
    quantity = fields.Int()
    adopted_count = fields.Int(data_key="adoptedCount")
    is_adopted = fields.Bool(data_key="isAdopted")
    created_at = fields.DateTime(data_key="createdAt")
