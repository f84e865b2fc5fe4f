# company/tests/test_profile.py

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from company.models import CompanyProfile, StaffMember
from company.services.profile import (
    get_currency_code,
    get_stock_order_method,
    normalize_stock_order_method,
)

User = get_user_model()


class StockOrderMethodTests(TestCase):
    """
    GUARANTEES:
    - Reading the policy never creates the singleton row
    - Blank policy means "no policy"
    """

    @override_settings(DEFAULT_STOCK_ORDER_METHOD="LIFO")
    def test_falls_back_to_settings_without_profile(self):
        self.assertEqual(get_stock_order_method(), "LIFO")
        self.assertFalse(CompanyProfile.objects.exists())

    def test_profile_value_wins(self):
        CompanyProfile.objects.create(stock_order_method="LIFO")
        self.assertEqual(get_stock_order_method(), "LIFO")

    def test_blank_profile_value_means_no_policy(self):
        CompanyProfile.objects.create(stock_order_method="")
        self.assertIsNone(get_stock_order_method())

    def test_normalize_rejects_unknown_method(self):
        self.assertEqual(normalize_stock_order_method(" fifo "), "FIFO")
        with self.assertRaises(ValueError):
            normalize_stock_order_method("AVG")


class CompanyProfileModelTests(TestCase):
    def test_singleton_pk(self):
        a = CompanyProfile.objects.create(company_name="Oak & Co")
        b = CompanyProfile(company_name="Oak & Co Ltd")
        b.save()

        self.assertEqual(a.pk, 1)
        self.assertEqual(b.pk, 1)
        self.assertEqual(CompanyProfile.objects.count(), 1)
        self.assertEqual(CompanyProfile.load().company_name, "Oak & Co Ltd")

    def test_new_instance_overwrites_loaded_profile(self):
        CompanyProfile.load()

        CompanyProfile(company_name="Teak House", stock_order_method="LIFO").save()

        self.assertEqual(CompanyProfile.objects.count(), 1)
        self.assertEqual(CompanyProfile.load().company_name, "Teak House")
        self.assertEqual(get_stock_order_method(), "LIFO")

    def test_currency_code_uppercased(self):
        CompanyProfile.objects.create(currency_code="lkr")
        self.assertEqual(get_currency_code(), "LKR")


class CompanyProfileApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="owner", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_update_stock_order_method(self):
        res = self.client.put(
            "/api/company/profile/",
            {"stock_order_method": "LIFO", "currency_code": "eur"},
            format="json",
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["stock_order_method"], "LIFO")
        self.assertEqual(res.data["currency_code"], "EUR")
        self.assertEqual(get_stock_order_method(), "LIFO")

    def test_requires_authentication(self):
        res = APIClient().get("/api/company/profile/")
        self.assertEqual(res.status_code, 401)


class StaffMemberApiTests(TestCase):
    """
    GUARANTEES:
    - Name and contact number are required
    - Name and position are stored in sentence case
    - Search matches name, email or contact number
    """

    def setUp(self):
        self.user = User.objects.create_user(username="manager", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_create_normalizes_case(self):
        res = self.client.post(
            "/api/company/staff/",
            {"name": "NIMAL perera", "position": "head CUTTER", "contact_number": "0771234567"},
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["name"], "Nimal perera")
        self.assertEqual(res.data["position"], "Head cutter")

    def test_contact_number_required(self):
        res = self.client.post(
            "/api/company/staff/",
            {"name": "Kamal", "position": "Polisher"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertIn("contact_number", res.data)

    def test_search_edit_delete(self):
        member = StaffMember.objects.create(
            name="Sunil", position="Carpenter", contact_number="0711111111", email="sunil@oak.test"
        )
        StaffMember.objects.create(name="Ruwan", position="Driver", contact_number="0722222222")

        res = self.client.get("/api/company/staff/", {"search": "oak.test"})
        self.assertEqual([row["name"] for row in res.data], ["Sunil"])

        res = self.client.put(
            f"/api/company/staff/{member.id}/", {"position": "workshop lead"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["position"], "Workshop lead")

        res = self.client.delete(f"/api/company/staff/{member.id}/")
        self.assertEqual(res.status_code, 204)
        self.assertFalse(StaffMember.objects.filter(id=member.id).exists())

        res = self.client.get(f"/api/company/staff/{member.id}/")
        self.assertEqual(res.status_code, 404)
