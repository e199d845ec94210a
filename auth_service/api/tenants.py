"""
Tenant management:
- POST   /tenants        (admin)
- GET    /tenants        (public, paginated)
- GET    /tenants/<id>   (admin)
- PATCH  /tenants/<id>   (admin)
- DELETE /tenants/<id>   (admin)
"""
from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request

from auth_service.api.utils.params import page_meta, parse_id
from auth_service.models.schemas.tenant import TenantListQuerySchema, TenantOutSchema, TenantSchema
from auth_service.models.user import Role
from auth_service.services.container import get_services
from auth_service.services.errors import NotFoundError
from auth_service.utils.decorators import roles_required

logger = logging.getLogger(__name__)

bp = Blueprint("tenants", __name__, url_prefix="/tenants")

tenant_schema = TenantSchema()
tenant_list_query_schema = TenantListQuerySchema()
tenant_out_schema = TenantOutSchema()
tenant_list_out_schema = TenantOutSchema(many=True)


def _get_or_400(tenant_id: str):
    pk = parse_id(tenant_id)
    tenant = get_services().tenants.get_by_id(pk)
    if tenant is None:
        raise NotFoundError("Tenant does not exist")
    return pk, tenant


@bp.post("")
@roles_required([Role.ADMIN])
def create_tenant():
    """
    Create a tenant.
    ---
    tags:
      - Tenants
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [name, address]
          properties:
            name: { type: string }
            address: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      401: { description: Unauthorized }
      403: { description: Forbidden }
    """
    payload = request.get_json(silent=True) or {}
    data = tenant_schema.load(payload)
    logger.debug("Request for creating tenant", extra={"tenant_name": data["name"]})

    tenant = get_services().tenants.create(**data)
    logger.info("Tenant has been created", extra={"tenant_id": tenant.id})
    return jsonify({"id": tenant.id}), 201


@bp.get("")
def list_tenants():
    """
    List tenants, newest first.
    ---
    tags:
      - Tenants
    parameters:
      - { in: query, name: currentPage, type: integer }
      - { in: query, name: perPage, type: integer }
      - { in: query, name: q, type: string, description: search in name and address }
    responses:
      200: { description: OK }
    """
    query = tenant_list_query_schema.load(request.args.to_dict())
    tenants, total = get_services().tenants.get_all(**query)
    logger.info("All tenants have been fetched")
    return jsonify({"data": tenant_list_out_schema.dump(tenants), **page_meta(total, query)}), 200


@bp.get("/<tenant_id>")
@roles_required([Role.ADMIN])
def get_tenant(tenant_id: str):
    """
    Get one tenant.
    ---
    tags:
      - Tenants
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tenant_id, type: integer, required: true }
    responses:
      200: { description: OK }
      400: { description: Invalid id or tenant does not exist }
    """
    pk, tenant = _get_or_400(tenant_id)
    logger.info("Tenant successfully fetched", extra={"tenant_id": pk})
    return jsonify(tenant_out_schema.dump(tenant)), 200


@bp.patch("/<tenant_id>")
@roles_required([Role.ADMIN])
def update_tenant(tenant_id: str):
    """
    Update a tenant's name and address.
    ---
    tags:
      - Tenants
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - { in: path, name: tenant_id, type: integer, required: true }
      - in: body
        name: body
        schema:
          type: object
          required: [name, address]
          properties:
            name: { type: string }
            address: { type: string }
    responses:
      200: { description: OK }
      400: { description: Validation error or tenant does not exist }
    """
    payload = request.get_json(silent=True) or {}
    data = tenant_schema.load(payload)
    pk, _ = _get_or_400(tenant_id)

    get_services().tenants.update_by_id(pk, **data)
    logger.info("Tenant has been updated", extra={"tenant_id": pk})
    return jsonify({"id": pk}), 200


@bp.delete("/<tenant_id>")
@roles_required([Role.ADMIN])
def delete_tenant(tenant_id: str):
    """
    Delete a tenant. Its users are kept, detached from the tenant.
    ---
    tags:
      - Tenants
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tenant_id, type: integer, required: true }
    responses:
      200: { description: OK }
      400: { description: Invalid id or tenant does not exist }
    """
    pk, _ = _get_or_400(tenant_id)
    get_services().tenants.delete_by_id(pk)
    logger.info("Tenant has been deleted", extra={"tenant_id": pk})
    return jsonify({"id": pk}), 200
