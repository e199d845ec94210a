import logging

from flask import Blueprint
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from auth_service import __version__
from auth_service.services.container import get_services

logger = logging.getLogger(__name__)

bp = Blueprint("health", __name__)

SERVICE_NAME = "auth-service"


def _database_ok() -> bool:
    try:
        with get_services().storage.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        return False
    return True


@bp.get("/health")
def health():
    """
    Liveness and database reachability of the auth service.
    ---
    tags:
      - Health
    responses:
      200:
        description: Service and database are up
        schema:
          type: object
          properties:
            status: { type: string, example: ok }
            service: { type: string, example: auth-service }
            version: { type: string, example: 1.0.0 }
            database: { type: string, example: ok }
      503:
        description: Database unreachable
    """
    db_ok = _database_ok()
    body = {
        "status": "ok" if db_ok else "degraded",
        "service": SERVICE_NAME,
        "version": __version__,
        "database": "ok" if db_ok else "unavailable",
    }
    return body, 200 if db_ok else 503
