from marshmallow import Schema, fields, validate


class CredentialsSchema(Schema):
    """Body of /auth/register and /auth/login. Format/strength checks live in the service."""
    email = fields.String(required=True, validate=validate.Length(min=1))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))


class UserOutSchema(Schema):
    id = fields.String(allow_none=False)
    email = fields.String(allow_none=False)


class UserMeOutSchema(UserOutSchema):
    created_at = fields.DateTime(data_key="createdAt", format="iso")
