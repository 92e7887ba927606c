# adoptly/api/adoption_requests/schemas.py
from marshmallow import Schema, fields, validate

from adoptly.schemas.address_schema import AddressSchema


class AdoptionRequestCreateSchema(Schema):
    """
    POST /request
    입양 요청 생성 시 데이터 형식을 정의하고 유효성을 검사합니다.
    클라이언트는 camelCase 키를 보내고, 서비스에는 snake_case 키로 전달됩니다.
    """
    user_id = fields.Str(required=True, data_key="userId", validate=validate.Length(min=1))
    user_email = fields.Email(data_key="userEmail", load_default=None, allow_none=True)
    pet_id = fields.Str(required=True, data_key="petId", validate=validate.Length(min=1))
    phone_number = fields.Str(data_key="phoneNumber", load_default=None, allow_none=True,
                              validate=validate.Length(max=30))
    address = fields.Nested(AddressSchema, required=True,
                            error_messages={"required": "주소(district, division)는 필수입니다."})
    quantity = fields.Int(required=True, validate=validate.Range(min=1, error="요청 수량은 1 이상이어야 합니다."))


class AdoptionRequestUpdateSchema(Schema):
    """
    PUT /request/<request_id>
    부분 업데이트 스키마. userId, userEmail, petId, quantity는 생성 후 변경할 수 없으므로 받지 않습니다.
    status는 pending/accepted/rejected 외의 값도 허용합니다.
    """
    status = fields.Str(validate=validate.Length(min=1, max=50))
    phone_number = fields.Str(data_key="phoneNumber", allow_none=True, validate=validate.Length(max=30))
    address = fields.Nested(AddressSchema)


class AdoptionRequestResponseSchema(Schema):
    """입양 요청 응답 스키마."""
    request_id = fields.Str(data_key="id", dump_only=True)
    user_id = fields.Str(data_key="userId")
    user_email = fields.Str(data_key="userEmail", allow_none=True)
    pet_id = fields.Str(data_key="petId")
    phone_number = fields.Str(data_key="phoneNumber", allow_none=True)
    address = fields.Nested(AddressSchema)
    quantity = fields.Int()
    status = fields.Str()
    request_date = fields.DateTime(data_key="requestDate")


class UserRequestsResponseSchema(Schema):
    """GET /request/user/<email> 응답 스키마."""
    total_request = fields.Int(data_key="totalRequest")
    request = fields.List(fields.Nested(AdoptionRequestResponseSchema))
