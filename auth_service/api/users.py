"""
User management (admin only):
- POST   /users
- GET    /users
- GET    /users/<id>
- PATCH  /users/<id>
- DELETE /users/<id>
"""
from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from auth_service.api.utils.params import page_meta, parse_id
from auth_service.models.schemas.user import (
    UserCreateSchema,
    UserListQuerySchema,
    UserOutSchema,
    UserUpdateSchema,
)
from auth_service.models.user import Role
from auth_service.services.container import get_services
from auth_service.services.errors import NotFoundError, ValidationError
from auth_service.utils.decorators import roles_required

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__, url_prefix="/users")

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_list_query_schema = UserListQuerySchema()
user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


def _ensure_tenant(tenant_id):
    if tenant_id is not None and get_services().tenants.get_by_id(tenant_id) is None:
        raise NotFoundError("Tenant does not exist")


@bp.post("")
@roles_required([Role.ADMIN])
def create_user():
    """
    Create a user with any role (e.g. a tenant manager).
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [firstName, lastName, email, password, role]
          properties:
            firstName: { type: string }
            lastName: { type: string }
            email: { type: string }
            password: { type: string }
            role: { type: string, enum: [admin, manager, customer] }
            tenantId: { type: integer }
    responses:
      201: { description: Created }
      400: { description: Validation error or email already exists }
      401: { description: Unauthorized }
      403: { description: Forbidden }
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)
    _ensure_tenant(data.get("tenant_id"))

    user = get_services().users.create(**data)
    logger.info("User has been created", extra={"user_id": user.id, "role": user.role})
    return jsonify({"id": user.id}), 201


@bp.get("")
@roles_required([Role.ADMIN])
def list_users():
    """
    List users, newest first.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: query, name: currentPage, type: integer }
      - { in: query, name: perPage, type: integer }
      - { in: query, name: q, type: string, description: search in name and email }
      - { in: query, name: role, type: string }
    responses:
      200: { description: OK }
    """
    query = user_list_query_schema.load(request.args.to_dict())
    users, total = get_services().users.get_all(**query)
    logger.info("All users have been fetched")
    return jsonify({"data": user_list_out_schema.dump(users), **page_meta(total, query)}), 200


@bp.get("/<user_id>")
@roles_required([Role.ADMIN])
def get_user(user_id: str):
    """
    Get one user with its tenant.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: integer, required: true }
    responses:
      200: { description: OK }
      400: { description: Invalid id or user does not exist }
    """
    pk = parse_id(user_id)
    user = get_services().users.find_by_id(pk)
    if user is None:
        raise NotFoundError("User does not exist.")
    logger.info("User has been fetched", extra={"user_id": pk})
    return jsonify(user_out_schema.dump(user)), 200


@bp.patch("/<user_id>")
@roles_required([Role.ADMIN])
def update_user(user_id: str):
    """
    Update name, role and tenant. Email and password cannot be changed here.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: user_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          required: [firstName, lastName, role]
          properties:
            firstName: { type: string }
            lastName: { type: string }
            role: { type: string }
            tenantId: { type: integer }
    responses:
      200: { description: OK }
      400: { description: Validation error or user does not exist }
    """
    pk = parse_id(user_id)
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)

    services = get_services()
    user = services.users.find_by_id(pk)
    if user is None:
        raise NotFoundError("User does not exist")
    _ensure_tenant(data.get("tenant_id"))

    # same rule as creation, applied to the tenant the user ends up with
    tenant_id = data.get("tenant_id", user.tenant_id)
    if data["role"] == Role.MANAGER.value and tenant_id is None:
        raise ValidationError(
            "tenantId is required!",
            errors=[{"field": "tenantId", "msg": "tenantId is required!"}],
        )

    services.users.update_by_id(pk, **data)
    logger.info("User has been updated", extra={"user_id": pk})
    return jsonify({"id": pk}), 200


@bp.delete("/<user_id>")
@roles_required([Role.ADMIN])
def delete_user(user_id: str):
    """
    Delete a user; their refresh tokens go with them.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: integer, required: true }
    responses:
      200: { description: OK }
      400: { description: Invalid id or user does not exist }
    """
    pk = parse_id(user_id)
    services = get_services()
    if services.users.find_by_id(pk) is None:
        raise NotFoundError("User doesn't exist")

    services.users.delete_by_id(pk)
    logger.info("User has been deleted", extra={"user_id": pk})
    return jsonify({"id": pk}), 200
