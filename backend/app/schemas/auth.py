"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, INCLUDE, Schema, fields, validate

_password = validate.Length(min=6, max=128)
_non_blank = validate.Regexp(r"\S", error="Must not be blank.")


class SignupSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=_password)


class SigninSchema(Schema):
    """Input payload for password sign-in."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Input payload carrying a refresh token (``refreshToken`` on the wire)."""

    refresh_token = fields.String(required=True, data_key="refreshToken", validate=_non_blank)


class LogoutSchema(Schema):
    """Logout body; a missing, null or blank token is accepted and ignored."""

    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(load_default="", allow_none=True, data_key="refreshToken")


class PasswordUpdateSchema(Schema):
    new_password = fields.String(required=True, data_key="newPassword", validate=_password)


class UserOutSchema(Schema):
    """Public user representation."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    role = fields.String(required=True)


class TokenBundleSchema(Schema):
    """Response payload of signin and refresh."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
    token_type = fields.String(data_key="tokenType")
    expires_in = fields.Integer(data_key="expiresIn")


class ExternalLoginSchema(Schema):
    """Response payload of the external login callback."""

    access_token = fields.String(required=True, data_key="accessToken")
    refresh_token = fields.String(required=True, data_key="refreshToken")
    expires_in = fields.Integer(data_key="expiresIn")
    email = fields.Email(required=True)


class CalendarEventSchema(Schema):
    """
    Calendar event body forwarded to the provider.

    Only a few fields are checked; anything else the provider understands
    passes through untouched.
    """

    class Meta:
        unknown = INCLUDE

    summary = fields.String()
    description = fields.String(allow_none=True)
    location = fields.String(allow_none=True)
    start = fields.Dict()
    end = fields.Dict()
