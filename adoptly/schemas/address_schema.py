# adoptly/schemas/address_schema.py
from marshmallow import Schema, fields, validate


class AddressSchema(Schema):
    """입양 요청/반려동물에 공통으로 쓰이는 주소 스키마. 두 필드 모두 필수입니다."""
    district = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    division = fields.Str(required=True, validate=validate.Length(min=1, max=100))
