import unittest

from auth_service.models.tenant import Tenant
from auth_service.models.user import Role, User
from tests.helpers import AppTestCase

TENANT_DATA = {"name": "Pizza Hub", "address": "Main street 1"}


class TenantCreateTests(AppTestCase):
    def test_admin_creates_tenant(self):
        res = self.client.post("/tenants", json=TENANT_DATA, headers=self.admin_headers())
        self.assertEqual(res.status_code, 201)
        tenant = self.session().query(Tenant).one()
        self.assertEqual(res.get_json(), {"id": tenant.id})
        self.assertEqual(tenant.name, "Pizza Hub")
        self.assertEqual(tenant.address, "Main street 1")

    def test_unauthenticated_is_401(self):
        res = self.client.post("/tenants", json=TENANT_DATA)
        self.assertEqual(res.status_code, 401)
        self.assertEqual(self.session().query(Tenant).count(), 0)

    def test_manager_is_403(self):
        tenant = self.services.tenants.create(**TENANT_DATA)
        manager = self.create_user(role=Role.MANAGER, email="manager@testemail.com", tenant_id=tenant.id)
        headers = {"Authorization": f"Bearer {self.access_token_for(manager)}"}
        res = self.client.post("/tenants", json={"name": "Other", "address": "Elsewhere"}, headers=headers)
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.get_json()["message"], "You don't have enough permissions")
        self.assertEqual(self.session().query(Tenant).count(), 1)

    def test_customer_is_403(self):
        customer = self.create_user()
        headers = {"Authorization": f"Bearer {self.access_token_for(customer)}"}
        res = self.client.post("/tenants", json=TENANT_DATA, headers=headers)
        self.assertEqual(res.status_code, 403)
        self.assertEqual(res.get_json()["error"], "FORBIDDEN")

    def test_missing_name_is_400(self):
        res = self.client.post("/tenants", json={"address": "Main street 1"}, headers=self.admin_headers())
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["message"], "Tenant name is required!")

    def test_blank_address_is_400(self):
        res = self.client.post(
            "/tenants", json={"name": "Pizza Hub", "address": "   "}, headers=self.admin_headers()
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["message"], "Tenant address is required!")

    def test_long_name_is_400(self):
        res = self.client.post(
            "/tenants", json={"name": "x" * 101, "address": "Main street 1"}, headers=self.admin_headers()
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["message"], "Tenant name should be less than 100 chars!")


class TenantReadTests(AppTestCase):
    def setUp(self):
        super().setUp()
        for i in range(8):
            self.services.tenants.create(name=f"Tenant {i}", address=f"Street {i}")

    def test_list_is_public_and_paginated(self):
        res = self.client.get("/tenants")
        self.assertEqual(res.status_code, 200)
        body = res.get_json()
        self.assertEqual(body["total"], 8)
        self.assertEqual(body["currentPage"], 1)
        self.assertEqual(body["perPage"], 6)
        self.assertEqual(len(body["data"]), 6)
        self.assertEqual(body["data"][0]["name"], "Tenant 7")

    def test_list_second_page(self):
        body = self.client.get("/tenants?currentPage=2&perPage=6").get_json()
        self.assertEqual([t["name"] for t in body["data"]], ["Tenant 1", "Tenant 0"])

    def test_list_search(self):
        body = self.client.get("/tenants", query_string={"q": "Street 3"}).get_json()
        self.assertEqual(body["total"], 1)
        self.assertEqual(body["data"][0]["name"], "Tenant 3")

    def test_list_bad_paging_falls_back_to_defaults(self):
        body = self.client.get("/tenants?currentPage=abc&perPage=-4").get_json()
        self.assertEqual(body["currentPage"], 1)
        self.assertEqual(body["perPage"], 1)

    def test_admin_gets_one(self):
        tenant = self.session().query(Tenant).filter(Tenant.name == "Tenant 2").one()
        res = self.client.get(f"/tenants/{tenant.id}", headers=self.admin_headers())
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.get_json()["address"], "Street 2")

    def test_get_one_requires_admin(self):
        self.assertEqual(self.client.get("/tenants/1").status_code, 401)

    def test_unknown_id_is_400(self):
        res = self.client.get("/tenants/999", headers=self.admin_headers())
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["message"], "Tenant does not exist")

    def test_non_numeric_id_is_400(self):
        res = self.client.get("/tenants/abc", headers=self.admin_headers())
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["message"], "Invalid url param")


class TenantWriteTests(AppTestCase):
    def setUp(self):
        super().setUp()
        self.tenant = self.services.tenants.create(**TENANT_DATA)

    def test_admin_updates_tenant(self):
        res = self.client.patch(
            f"/tenants/{self.tenant.id}",
            json={"name": "Burger Hub", "address": "Side street 2"},
            headers=self.admin_headers(),
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.get_json(), {"id": self.tenant.id})
        tenant = self.services.tenants.get_by_id(self.tenant.id)
        self.assertEqual(tenant.name, "Burger Hub")
        self.assertEqual(tenant.address, "Side street 2")

    def test_update_unknown_tenant_is_400(self):
        res = self.client.patch("/tenants/999", json=TENANT_DATA, headers=self.admin_headers())
        self.assertEqual(res.status_code, 400)

    def test_update_requires_admin(self):
        customer = self.create_user()
        headers = {"Authorization": f"Bearer {self.access_token_for(customer)}"}
        res = self.client.patch(f"/tenants/{self.tenant.id}", json=TENANT_DATA, headers=headers)
        self.assertEqual(res.status_code, 403)

    def test_admin_deletes_tenant(self):
        res = self.client.delete(f"/tenants/{self.tenant.id}", headers=self.admin_headers())
        self.assertEqual(res.status_code, 200)
        self.assertIsNone(self.services.tenants.get_by_id(self.tenant.id))

    def test_delete_keeps_users_without_tenant(self):
        manager = self.create_user(role=Role.MANAGER, email="manager@testemail.com", tenant_id=self.tenant.id)
        self.client.delete(f"/tenants/{self.tenant.id}", headers=self.admin_headers())
        user = self.session().query(User).filter(User.id == manager.id).one()
        self.assertIsNone(user.tenant_id)

    def test_delete_unknown_tenant_is_400(self):
        res = self.client.delete("/tenants/999", headers=self.admin_headers())
        self.assertEqual(res.status_code, 400)


if __name__ == "__main__":
    unittest.main()
