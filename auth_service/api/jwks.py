from flask import Blueprint, jsonify

from auth_service.services.container import get_services

bp = Blueprint("jwks", __name__)


@bp.get("/.well-known/jwks.json")
def jwks():
    """
    Public key set for verifying access tokens (RS256).
    ---
    tags:
      - Auth
    responses:
      200:
        description: JWK set
      500:
        description: Signing key is not configured
    """
    response = jsonify(get_services().keys.jwks())
    response.headers["Cache-Control"] = "public, max-age=3600"
    return response
