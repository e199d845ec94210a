import unittest

from tests.helpers import AppTestCase, cookie_header, response_cookies


class LogoutTests(AppTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user()
        self.refresh_token, self.record = self.refresh_token_for(self.user)

    def logout(self, token):
        return self.client.post("/auth/logout", headers=cookie_header(refresh_token=token))

    def test_returns_200_and_empty_body(self):
        res = self.logout(self.refresh_token)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.get_json(), {})

    def test_deletes_the_refresh_record(self):
        self.logout(self.refresh_token)
        self.assertFalse(self.services.token_store.exists(self.record.id))
        self.assertEqual(self.refresh_token_count(self.user.id), 0)

    def test_clears_both_cookies(self):
        cookies = response_cookies(self.logout(self.refresh_token))
        for name in ("accessToken", "refreshToken"):
            self.assertEqual(cookies[name].value, "")
            self.assertEqual(str(cookies[name]["max-age"]), "0")

    def test_token_cannot_refresh_after_logout(self):
        self.logout(self.refresh_token)
        res = self.client.post("/auth/refresh", headers=cookie_header(refresh_token=self.refresh_token))
        self.assertEqual(res.status_code, 401)

    def test_second_logout_with_same_token_is_401(self):
        self.assertEqual(self.logout(self.refresh_token).status_code, 200)
        self.assertEqual(self.logout(self.refresh_token).status_code, 401)

    def test_other_sessions_survive(self):
        _, other = self.refresh_token_for(self.user)
        self.logout(self.refresh_token)
        self.assertTrue(self.services.token_store.exists(other.id))

    def test_missing_cookie_is_401(self):
        res = self.client.post("/auth/logout")
        self.assertEqual(res.status_code, 401)
        self.assertTrue(self.services.token_store.exists(self.record.id))

    def test_access_token_alone_is_401(self):
        res = self.client.post("/auth/logout", headers=cookie_header(access_token=self.access_token_for(self.user)))
        self.assertEqual(res.status_code, 401)


if __name__ == "__main__":
    unittest.main()
