"""flask-jwt-extended adapter for the token codec port."""

from .flask_jwt_token_codec import JWTTokenCodec

__all__ = ["JWTTokenCodec"]
