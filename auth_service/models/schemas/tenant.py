from marshmallow import Schema, fields, pre_load, validate

from auth_service.models.schemas.common import PaginationQuerySchema, strip_strings


class TenantSchema(Schema):
    name = fields.String(
        required=True,
        error_messages={"required": "Tenant name is required!", "null": "Tenant name is required!"},
        validate=[
            validate.Length(min=1, error="Tenant name is required!"),
            validate.Length(max=100, error="Tenant name should be less than 100 chars!"),
        ],
    )
    address = fields.String(
        required=True,
        error_messages={"required": "Tenant address is required!", "null": "Tenant address is required!"},
        validate=[
            validate.Length(min=1, error="Tenant address is required!"),
            validate.Length(max=255, error="Tenant address should be less than 255 chars!"),
        ],
    )

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data)


class TenantListQuerySchema(PaginationQuerySchema):
    pass


class TenantOutSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    address = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
