from marketplace.rbac import Permission, Role

from .conftest import bearer


def test_user_reads_own_profile(client, make_user):
    doc, token = make_user(Role.CUSTOMER)
    res = client.get(f"/api/v1/users/{doc['_id']}", headers=bearer(token))
    assert res.status_code == 200
    assert "password" not in res.json()["data"]


def test_customer_cannot_read_others(client, make_user):
    other, _ = make_user(Role.CUSTOMER)
    _, token = make_user(Role.CUSTOMER)
    res = client.get(f"/api/v1/users/{other['_id']}", headers=bearer(token))
    assert res.status_code == 403
    assert res.json()["required"] == ["USER_READ"]


def test_support_reads_any_profile(client, make_user):
    other, _ = make_user(Role.CUSTOMER)
    _, token = make_user(Role.SUPPORT)
    assert client.get(f"/api/v1/users/{other['_id']}", headers=bearer(token)).status_code == 200


def test_grant_direct_permissions(client, make_user, users):
    target, _ = make_user(Role.CUSTOMER)
    _, admin = make_user(Role.SUPER_ADMIN)

    res = client.patch(
        f"/api/v1/users/{target['_id']}/permissions",
        headers=bearer(admin),
        json={"permissions": ["VENDOR_READ", "VENDOR_READ", "ORDER_REFUND"]},
    )

    assert res.status_code == 200
    assert users.docs[str(target["_id"])]["permissions"] == ["VENDOR_READ", "ORDER_REFUND"]


def test_grant_rejects_unknown_permission(client, make_user):
    target, _ = make_user(Role.CUSTOMER)
    _, admin = make_user(Role.SUPER_ADMIN)
    res = client.patch(
        f"/api/v1/users/{target['_id']}/permissions",
        headers=bearer(admin),
        json={"permissions": ["EVERYTHING"]},
    )
    assert res.status_code == 422


def test_support_cannot_update_permissions(client, make_user):
    target, _ = make_user(Role.CUSTOMER)
    _, support = make_user(Role.SUPPORT)
    res = client.patch(
        f"/api/v1/users/{target['_id']}/permissions",
        headers=bearer(support),
        json={"permissions": []},
    )
    assert res.status_code == 403
    assert res.json()["required"] == Permission.USER_UPDATE.value


def test_deleted_user_can_no_longer_authenticate(client, make_user):
    target, target_token = make_user(Role.CUSTOMER)
    _, admin = make_user(Role.SUPER_ADMIN)

    res = client.delete(f"/api/v1/users/{target['_id']}", headers=bearer(admin))
    assert res.status_code == 200

    res = client.get("/api/v1/auth/me", headers=bearer(target_token))
    assert res.status_code == 401
    assert res.json()["message"] == "User not found"


def test_create_admin(client, make_user):
    _, admin = make_user(Role.SUPER_ADMIN)
    res = client.post(
        "/api/v1/users/admins",
        headers=bearer(admin),
        json={"name": "Second Admin", "email": "root2@example.com", "password": "longenough"},
    )
    assert res.status_code == 201
    assert res.json()["data"]["role"] == "SUPER_ADMIN"


def test_permission_denied_before_body_is_validated(client, make_user):
    target, _ = make_user(Role.CUSTOMER)
    _, support = make_user(Role.SUPPORT)
    res = client.patch(
        f"/api/v1/users/{target['_id']}/permissions",
        headers=bearer(support),
        json={"permissions": ["EVERYTHING"]},
    )
    assert res.status_code == 403
    assert res.json()["required"] == "USER_UPDATE"
