import unittest

from tests.helpers import AppTestCase, is_jwt, response_cookies


class LoginTests(AppTestCase):
    def setUp(self):
        super().setUp()
        self.user = self.create_user(email="pankaj@testemail.com", password="secret123")

    def login(self, email="pankaj@testemail.com", password="secret123"):
        return self.client.post("/auth/login", json={"email": email, "password": password})

    def test_returns_200_and_user_id(self):
        res = self.login()
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.get_json(), {"id": self.user.id})

    def test_sets_both_cookies(self):
        cookies = response_cookies(self.login())
        self.assertTrue(is_jwt(cookies["accessToken"].value))
        self.assertTrue(is_jwt(cookies["refreshToken"].value))

    def test_each_login_adds_a_refresh_token(self):
        self.login()
        self.assertEqual(self.refresh_token_count(self.user.id), 1)
        self.login()
        self.assertEqual(self.refresh_token_count(self.user.id), 2)

    def test_email_is_case_insensitive(self):
        res = self.login(email="  PANKAJ@testemail.com ")
        self.assertEqual(res.status_code, 200)

    def test_wrong_password_is_rejected(self):
        res = self.login(password="wrongpassword")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["message"], "Email or Password does not match")
        self.assertNotIn("Set-Cookie", res.headers)
        self.assertEqual(self.refresh_token_count(), 0)

    def test_unknown_email_gets_same_message(self):
        unknown = self.login(email="nobody@testemail.com")
        wrong = self.login(password="wrongpassword")
        self.assertEqual(unknown.status_code, wrong.status_code)
        self.assertEqual(unknown.get_json(), wrong.get_json())

    def test_missing_password_is_rejected(self):
        res = self.client.post("/auth/login", json={"email": "pankaj@testemail.com"})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["message"], "password is required!")

    def test_invalid_email_is_rejected(self):
        res = self.login(email="pankaj")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["message"], "Invalid email format!")

    def test_non_json_body_is_a_validation_error(self):
        res = self.client.post("/auth/login", data="email=x", content_type="text/plain")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.get_json()["error"], "VALIDATION_ERROR")


if __name__ == "__main__":
    unittest.main()
