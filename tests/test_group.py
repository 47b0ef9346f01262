"""Tests for the group blueprint."""

from __future__ import annotations

from tests.conftest import ADMIN_ID, MEMBER_ID, OUTSIDER_ID, FirestoreTestCase


class GroupRoutesTestCase(FirestoreTestCase):
    """Test case for the group blueprint."""

    def test_requires_login(self) -> None:
        response = self.client.get("/groups/")
        self.assertEqual(response.status_code, 401)

    def test_create_and_list_groups(self) -> None:
        self.login()
        response = self.client.post(
            "/groups/site",
            json={
                "name": "Tower 7",
                "location": "Hill Road",
                "category": "telecom",
                "companies": ["airtel"],
            },
        )
        self.assertEqual(response.status_code, 201)
        group = response.get_json()["group"]
        self.assertEqual(group["adminId"], ADMIN_ID)
        self.assertEqual(group["selectedCompanies"], ["airtel"])

        response = self.client.get("/groups/")
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual([g["id"] for g in data["sites"]], [group["id"]])
        self.assertEqual(data["stores"], [])

    def test_create_group_validation(self) -> None:
        self.login()
        response = self.client.post("/groups/site", json={"location": "Hill Road"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("name", response.get_json()["error"])

        response = self.client.post(
            "/groups/site",
            json={"name": "A", "location": "B", "companies": ["unknown"]},
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            "/groups/depot", json={"name": "A", "location": "B"}
        )
        self.assertEqual(response.status_code, 404)

    def test_view_group_includes_presets(self) -> None:
        self.make_group("store", "store1", "South Store")
        self.db.collection("stores").document("store1").update(
            {"selectedCompanies": ["adani"]}
        )
        self.login()
        response = self.client.get("/groups/store/store1")
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["group"]["name"], "South Store")
        self.assertIn({"name": "Adani Meter", "unit": "units"}, data["presets"])

    def test_view_group_forbidden_for_outsiders(self) -> None:
        self.make_group("site", "site1")
        self.login(OUTSIDER_ID)
        response = self.client.get("/groups/site/site1")
        self.assertEqual(response.status_code, 403)

    def test_view_missing_group(self) -> None:
        self.login()
        response = self.client.get("/groups/site/nope")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["error"], "Group not found.")

    def test_update_settings(self) -> None:
        self.make_group("site", "site1", members=[ADMIN_ID, MEMBER_ID])
        self.login(MEMBER_ID)
        response = self.client.post(
            "/groups/site/site1/settings", json={"name": "Mine now"}
        )
        self.assertEqual(response.status_code, 403)

        self.login()
        response = self.client.post(
            "/groups/site/site1/settings", json={"location": "New Road"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.group_data("site", "site1")["location"], "New Road")

    def test_member_management(self) -> None:
        self.make_group("site", "site1")
        self.login()

        response = self.client.post(
            "/groups/site/site1/members", json={"userId": MEMBER_ID}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["group"]["members"], [ADMIN_ID, MEMBER_ID])

        response = self.client.get("/groups/site/site1/members?q=bob")
        self.assertEqual(
            [m["id"] for m in response.get_json()["members"]], [MEMBER_ID]
        )

        response = self.client.delete(f"/groups/site/site1/members/{ADMIN_ID}")
        self.assertEqual(response.status_code, 409)

        response = self.client.delete(f"/groups/site/site1/members/{MEMBER_ID}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.group_data("site", "site1")["members"], [ADMIN_ID])

    def test_transfer_candidates_and_catalog(self) -> None:
        self.make_group("site", "site1", "North Site")
        self.make_group("store", "store1", "South Store")
        self.login()

        response = self.client.get("/groups/transfer-candidates?exclude=site1")
        self.assertEqual(
            [g["id"] for g in response.get_json()["groups"]], ["store1"]
        )

        response = self.client.get("/groups/catalog")
        self.assertEqual(
            [c["id"] for c in response.get_json()["categories"]],
            ["telecom", "gaspipeline"],
        )
