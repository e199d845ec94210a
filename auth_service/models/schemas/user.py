from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
    validates,
    validates_schema,
)

from auth_service.models.schemas.common import PaginationQuerySchema, strip_strings
from auth_service.models.user import Role


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _required_string(name: str, **kwargs):
    message = f"{name} is required!"
    return fields.String(
        required=True,
        error_messages={"required": message, "null": message},
        validate=validate.Length(min=1, error=message),
        **kwargs,
    )


class CredentialsMixin(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.Email(
        required=True,
        error_messages={
            "required": "email is required!",
            "null": "email is required!",
            "invalid": "Invalid email format!",
        },
    )

    @pre_load
    def normalize(self, data, **kwargs):
        data = strip_strings(data)
        if isinstance(data, dict) and "email" in data:
            data["email"] = _norm_email(data["email"])
        return data


class RegisterSchema(CredentialsMixin):
    first_name = _required_string("firstName", data_key="firstName")
    last_name = _required_string("lastName", data_key="lastName")
    password = fields.String(
        required=True,
        load_only=True,
        error_messages={"required": "password is required!", "null": "password is required!"},
    )

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password should be atleast 8 characters!")


class LoginSchema(CredentialsMixin):
    password = fields.String(
        required=True,
        load_only=True,
        error_messages={"required": "password is required!", "null": "password is required!"},
        validate=validate.Length(min=1, error="password is required!"),
    )


class UserCreateSchema(RegisterSchema):
    role = fields.String(
        required=True,
        error_messages={"required": "Role is required!"},
        validate=validate.OneOf(Role.values(), error="Role must be one of: {choices}"),
    )
    tenant_id = fields.Integer(
        data_key="tenantId",
        allow_none=True,
        load_default=None,
        error_messages={"invalid": "tenantId must be an integer"},
    )

    @validates_schema
    def validate_tenant(self, data, **kwargs):
        if data.get("role") == Role.MANAGER.value and data.get("tenant_id") is None:
            raise ValidationError("tenantId is required!", field_name="tenantId")


class UserUpdateSchema(Schema):
    """Email and password are not updatable through this schema; they are dropped."""

    class Meta:
        unknown = EXCLUDE

    first_name = _required_string("First name", data_key="firstName")
    last_name = _required_string("Last name", data_key="lastName")
    role = fields.String(
        required=True,
        error_messages={"required": "Role is required!"},
        validate=validate.OneOf(Role.values(), error="Role must be one of: {choices}"),
    )
    # absent: keep the current tenant; null: detach
    tenant_id = fields.Integer(data_key="tenantId", allow_none=True)

    @pre_load
    def normalize(self, data, **kwargs):
        return strip_strings(data)


class UserListQuerySchema(PaginationQuerySchema):
    role = fields.String(
        load_default=None,
        validate=validate.OneOf(Role.values(), error="Role must be one of: {choices}"),
    )


class TenantRefSchema(Schema):
    id = fields.Integer()
    name = fields.String()
    address = fields.String()


class UserOutSchema(Schema):
    """Serialized user. There is no password field, by construction."""

    id = fields.Integer()
    first_name = fields.String(data_key="firstName")
    last_name = fields.String(data_key="lastName")
    email = fields.String()
    role = fields.String()
    tenant = fields.Nested(TenantRefSchema, allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
