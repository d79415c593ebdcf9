import pytest

from marketplace.rbac import Permission, Role

from .conftest import bearer


@pytest.fixture
def vendor_account(make_user, vendors):
    """A vendor user, its profile, and its access token."""
    doc, token = make_user(Role.VENDOR, is_approved=False)
    profile = vendors.add({"user_id": str(doc["_id"]), "business_name": "Joe's", "approval_token": "x" * 64})
    return doc, profile, token


class TestApprove:
    def test_super_admin_approves(self, client, make_user, vendor_account, users, vendors):
        user, profile, _ = vendor_account
        _, admin = make_user(Role.SUPER_ADMIN)

        res = client.patch(f"/api/v1/vendors/{profile['_id']}/approve", headers=bearer(admin))

        assert res.status_code == 200
        assert "approval_token" not in res.json()["data"]
        assert vendors.docs[str(profile["_id"])]["is_approved"] is True
        assert users.docs[str(user["_id"])]["is_approved"] is True

    def test_customer_is_forbidden(self, client, make_user, vendor_account):
        _, profile, _ = vendor_account
        _, customer = make_user(Role.CUSTOMER)

        res = client.patch(f"/api/v1/vendors/{profile['_id']}/approve", headers=bearer(customer))

        assert res.status_code == 403
        assert res.json() == {
            "success": False,
            "message": "Insufficient permissions",
            "required": "VENDOR_APPROVE",
        }

    def test_direct_grant_allows_support(self, client, make_user, vendor_account):
        _, profile, _ = vendor_account
        _, support = make_user(Role.SUPPORT, permissions=[Permission.VENDOR_APPROVE])
        res = client.patch(f"/api/v1/vendors/{profile['_id']}/approve", headers=bearer(support))
        assert res.status_code == 200

    def test_unknown_vendor(self, client, make_user):
        _, admin = make_user(Role.SUPER_ADMIN)
        res = client.patch("/api/v1/vendors/64b7f0c2a1b2c3d4e5f60718/approve", headers=bearer(admin))
        assert res.status_code == 404

    def test_requires_authentication(self, client, vendor_account):
        _, profile, _ = vendor_account
        res = client.patch(f"/api/v1/vendors/{profile['_id']}/approve")
        assert res.status_code == 401
        assert res.json()["message"] == "Not authorized, no token"


class TestSuspend:
    def test_needs_both_permissions(self, client, make_user, vendor_account):
        _, profile, _ = vendor_account
        _, partial = make_user(Role.SUPPORT, permissions=[Permission.VENDOR_SUSPEND])

        res = client.patch(f"/api/v1/vendors/{profile['_id']}/suspend", headers=bearer(partial))

        assert res.status_code == 403
        assert res.json()["required"] == ["VENDOR_SUSPEND", "VENDOR_UPDATE"]

    def test_suspension_deactivates_user(self, client, make_user, vendor_account, users):
        user, profile, _ = vendor_account
        _, admin = make_user(Role.SUPER_ADMIN)

        res = client.patch(
            f"/api/v1/vendors/{profile['_id']}/suspend",
            headers=bearer(admin),
            json={"reason": "counterfeit goods"},
        )

        assert res.status_code == 200
        assert res.json()["data"]["suspension_reason"] == "counterfeit goods"
        assert users.docs[str(user["_id"])]["is_active"] is False

    def test_suspended_vendor_token_stops_working(self, client, make_user, vendor_account):
        _, profile, vendor_token = vendor_account
        _, admin = make_user(Role.SUPER_ADMIN)
        client.patch(f"/api/v1/vendors/{profile['_id']}/suspend", headers=bearer(admin))

        res = client.put(
            f"/api/v1/vendors/{profile['_id']}/profile",
            headers=bearer(vendor_token),
            json={"business_name": "Still Open"},
        )
        assert res.status_code == 403
        assert res.json()["message"] == "Account is suspended"


class TestProfileOwnership:
    def test_owner_can_update(self, client, vendor_account):
        _, profile, token = vendor_account
        res = client.put(
            f"/api/v1/vendors/{profile['_id']}/profile",
            headers=bearer(token),
            json={"business_name": "Joe's Gadgets"},
        )
        assert res.status_code == 200
        assert res.json()["data"]["business_name"] == "Joe's Gadgets"

    def test_other_vendor_is_denied(self, client, make_user, vendor_account):
        _, profile, _ = vendor_account
        _, other = make_user(Role.VENDOR)
        res = client.put(
            f"/api/v1/vendors/{profile['_id']}/profile",
            headers=bearer(other),
            json={"business_name": "Hijacked"},
        )
        assert res.status_code == 403
        assert res.json() == {
            "success": False,
            "message": "Access denied - resource ownership required",
        }

    def test_missing_profile(self, client, vendor_account):
        _, _, token = vendor_account
        res = client.put(
            "/api/v1/vendors/64b7f0c2a1b2c3d4e5f60718/profile",
            headers=bearer(token),
            json={"business_name": "Nobody"},
        )
        assert res.status_code == 404
        assert res.json()["message"] == "Resource not found"

    def test_lookup_error_is_500(self, client, vendor_account, vendors):
        _, profile, token = vendor_account

        async def broken(vendor_id):
            raise ConnectionError("db down")

        vendors.find_by_id = broken
        res = client.put(
            f"/api/v1/vendors/{profile['_id']}/profile",
            headers=bearer(token),
            json={"business_name": "Whatever"},
        )
        assert res.status_code == 500
        assert res.json() == {"success": False, "message": "Error checking resource ownership"}


def test_list_vendors_filters_by_approval(client, make_user, vendors):
    vendors.add({"user_id": "a", "is_approved": True})
    vendors.add({"user_id": "b", "is_approved": False})
    _, support = make_user(Role.SUPPORT)

    res = client.get("/api/v1/vendors/?approved=true", headers=bearer(support))

    assert res.status_code == 200
    assert res.json()["data"]["total"] == 1


class TestOwnProfile:
    def test_vendor_reads_own_profile(self, client, vendor_account):
        _, profile, token = vendor_account
        res = client.get("/api/v1/vendors/profile", headers=bearer(token))
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["_id"] == str(profile["_id"])
        assert "approval_token" not in data

    def test_stats_default_to_zero(self, client, vendor_account, vendors):
        _, profile, token = vendor_account
        vendors.docs[str(profile["_id"])]["total_orders"] = 3

        res = client.get("/api/v1/vendors/stats", headers=bearer(token))

        assert res.status_code == 200
        assert res.json()["data"] == {
            "total_sales": 0,
            "total_orders": 3,
            "rating": 0,
            "review_count": 0,
        }

    def test_customer_has_no_vendor_profile(self, client, make_user):
        _, token = make_user(Role.CUSTOMER)
        res = client.get("/api/v1/vendors/profile", headers=bearer(token))
        assert res.status_code == 404
        assert res.json()["message"] == "Vendor profile not found"
