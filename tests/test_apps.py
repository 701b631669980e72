import pytest
from sqlalchemy import func, select

from mogami_api.core.database import AsyncSessionLocal
from mogami_api.models import App, AppEnv, AppMint, AppUser
from tests.helpers import CREATE_APP, MINT_PUBLIC_KEY, error_code, graphql

APP_FIELDS = """
id index name webhookAcceptIncoming webhookEventEnabled webhookEventUrl webhookSecret
webhookVerifyEnabled webhookVerifyUrl envs { id name clusterId }
"""

USER_UPDATE_APP = f"""
mutation UpdateApp($appId: String!, $input: AppUpdateInput!) {{
  userUpdateApp(appId: $appId, input: $input) {{ {APP_FIELDS} }}
}}
"""

UPDATE_CLUSTER = """
mutation UpdateCluster($clusterId: String!, $input: AdminClusterUpdateInput!) {
  adminUpdateCluster(clusterId: $clusterId, input: $input) { id status }
}
"""

ADMIN_UPDATE_APP = f"""
mutation UpdateApp($appId: String!, $input: AppUpdateInput!) {{
  adminUpdateApp(appId: $appId, input: $input) {{ {APP_FIELDS} }}
}}
"""


async def _stored_webhook_secret(app_id):
    async with AsyncSessionLocal() as db:
        result = await db.execute(select(App.webhook_secret).where(App.id == app_id))
        return result.scalar_one()


async def _row_counts():
    async with AsyncSessionLocal() as db:
        counts = {}
        for model in (App, AppUser, AppEnv, AppMint):
            result = await db.execute(select(func.count()).select_from(model))
            counts[model.__tablename__] = result.scalar_one()
        return counts


def test_admin_create_app_creates_default_env(make_app):
    created = make_app("Shop")
    assert created["name"] == "Shop"
    assert len(created["envs"]) == 1

    env = created["envs"][0]
    assert env["name"] == "Solana Devnet"
    assert env["clusterId"] == "solana-devnet"
    assert env["cluster"] == {"id": "solana-devnet", "status": "Active"}
    assert [m["address"] for m in env["mints"]] == [MINT_PUBLIC_KEY]
    assert env["mints"][0]["addMemo"] is False

    assert created["users"] == [{"role": "Owner", "user": {"username": "admin"}}]


def test_admin_create_app_rejects_duplicate_index(client, admin_token, run, make_app):
    created = make_app()
    before = run(_row_counts)
    body = graphql(client, CREATE_APP, {"input": {"index": created["index"], "name": "Again"}}, admin_token)
    assert body["data"]["adminCreateApp"] is None
    assert error_code(body) == "CONFLICT"
    # No app, membership, environment or app mint survives the rejected attempt
    assert run(_row_counts) == before


def test_admin_create_app_requires_active_default_cluster(client, admin_token, run):
    before = run(_row_counts)
    deactivate = graphql(client, UPDATE_CLUSTER, {"clusterId": "solana-devnet", "input": {"status": "Inactive"}}, admin_token)
    assert deactivate["data"]["adminUpdateCluster"]["status"] == "Inactive"
    try:
        body = graphql(client, CREATE_APP, {"input": {"index": 20_000, "name": "No Devnet"}}, admin_token)
        assert body["data"]["adminCreateApp"] is None
        assert body["errors"][0]["message"] == "Cluster solana-devnet is not active"
        assert error_code(body) == "BAD_USER_INPUT"
        assert run(_row_counts) == before
    finally:
        graphql(client, UPDATE_CLUSTER, {"clusterId": "solana-devnet", "input": {"status": "Active"}}, admin_token)


@pytest.mark.parametrize("app_input,message", [
    ({"index": -1, "name": "Negative"}, "index must not be negative"),
    ({"index": 10_000, "name": "  "}, "name should not be empty"),
])
def test_admin_create_app_validates_input(client, admin_token, app_input, message):
    body = graphql(client, CREATE_APP, {"input": app_input}, admin_token)
    assert body["errors"][0]["message"] == message
    assert error_code(body) == "BAD_USER_INPUT"


def test_user_apps_lists_memberships_only(client, user, member_app, make_app):
    not_mine = make_app("Not Mine")
    body = graphql(client, "query { userApps { id name } }", token=user["token"])
    ids = [a["id"] for a in body["data"]["userApps"]]
    assert member_app["id"] in ids
    assert not_mine["id"] not in ids


def test_admin_apps_lists_every_app(client, admin_token, member_app, make_app):
    other = make_app("Other")
    body = graphql(client, "query { adminApps { id index } }", token=admin_token)
    apps = body["data"]["adminApps"]
    ids = [a["id"] for a in apps]
    assert member_app["id"] in ids and other["id"] in ids
    assert [a["index"] for a in apps] == sorted(a["index"] for a in apps)


def test_user_app_returns_envs(client, user, member_app):
    body = graphql(
        client,
        f'query {{ userApp(appId: "{member_app["id"]}") {{ {APP_FIELDS} }} }}',
        token=user["token"],
    )
    app = body["data"]["userApp"]
    assert app["id"] == member_app["id"]
    assert app["envs"][0]["clusterId"] == "solana-devnet"


def test_user_app_is_forbidden_for_non_members(client, other_user, member_app):
    body = graphql(client, f'query {{ userApp(appId: "{member_app["id"]}") {{ id }} }}', token=other_user["token"])
    assert body["data"]["userApp"] is None
    assert error_code(body) == "FORBIDDEN"


def test_unknown_app_is_not_found(client, admin_token):
    body = graphql(client, 'query { adminApp(appId: "missing") { id } }', token=admin_token)
    assert body["errors"][0]["message"] == "App with id missing not found"
    assert error_code(body) == "NOT_FOUND"


def test_user_update_app_applies_sent_fields_only(client, user, member_app):
    body = graphql(
        client,
        USER_UPDATE_APP,
        {
            "appId": member_app["id"],
            "input": {
                "webhookEventEnabled": True,
                "webhookEventUrl": "https://hooks.example.com/event",
                "webhookVerifyUrl": "http://localhost:8080/verify",
            },
        },
        user["token"],
    )
    assert "errors" not in body, body
    app = body["data"]["userUpdateApp"]
    assert app["name"] == "Member App"
    assert app["webhookEventEnabled"] is True
    assert app["webhookEventUrl"] == "https://hooks.example.com/event"
    assert app["webhookVerifyUrl"] == "http://localhost:8080/verify"
    assert app["webhookVerifyEnabled"] is False

    body = graphql(client, USER_UPDATE_APP, {"appId": member_app["id"], "input": {"name": "Renamed"}}, user["token"])
    app = body["data"]["userUpdateApp"]
    assert app["name"] == "Renamed"
    assert app["webhookEventUrl"] == "https://hooks.example.com/event"


@pytest.mark.parametrize("field,message", [
    ("webhookEventUrl", "webhookEventUrl must be a url"),
    ("webhookVerifyUrl", "webhookVerifyUrl must be a url"),
])
def test_user_update_app_rejects_invalid_urls(client, user, member_app, field, message):
    body = graphql(client, USER_UPDATE_APP, {"appId": member_app["id"], "input": {field: "foo"}}, user["token"])
    assert body["errors"][0]["message"] == message
    assert error_code(body) == "BAD_USER_INPUT"


def test_user_update_app_is_forbidden_for_non_members(client, other_user, member_app):
    body = graphql(client, USER_UPDATE_APP, {"appId": member_app["id"], "input": {"name": "Hijack"}}, other_user["token"])
    assert error_code(body) == "FORBIDDEN"


def test_webhook_secret_is_encrypted_at_rest(client, admin_token, run, make_app):
    created = make_app()
    body = graphql(
        client,
        ADMIN_UPDATE_APP,
        {"appId": created["id"], "input": {"webhookSecret": "s3cr3t"}},
        admin_token,
    )
    assert body["data"]["adminUpdateApp"]["webhookSecret"] == "s3cr3t"
    stored = run(_stored_webhook_secret, created["id"])
    assert stored and stored != "s3cr3t"


def test_admin_update_unknown_app(client, admin_token):
    body = graphql(client, ADMIN_UPDATE_APP, {"appId": "missing", "input": {"name": "x"}}, admin_token)
    assert error_code(body) == "NOT_FOUND"


def test_update_app_null_clears_nullable_fields(client, admin_token, make_app):
    created = make_app()
    body = graphql(
        client,
        ADMIN_UPDATE_APP,
        {
            "appId": created["id"],
            "input": {
                "webhookEventUrl": "https://example.com/hook",
                "webhookVerifyUrl": "https://example.com/verify",
                "webhookSecret": "s3cr3t",
            },
        },
        admin_token,
    )
    assert body["data"]["adminUpdateApp"]["webhookEventUrl"] == "https://example.com/hook"

    body = graphql(
        client,
        ADMIN_UPDATE_APP,
        {"appId": created["id"], "input": {"webhookEventUrl": None, "webhookSecret": None}},
        admin_token,
    )
    assert "errors" not in body, body
    app = body["data"]["adminUpdateApp"]
    assert app["webhookEventUrl"] is None
    assert app["webhookSecret"] is None
    assert app["webhookVerifyUrl"] == "https://example.com/verify"


@pytest.mark.parametrize("field,message", [
    ("name", "name must not be null"),
    ("webhookEventEnabled", "webhookEventEnabled must not be null"),
])
def test_update_app_rejects_null_for_required_fields(client, user, member_app, field, message):
    body = graphql(client, USER_UPDATE_APP, {"appId": member_app["id"], "input": {field: None}}, user["token"])
    assert body["data"]["userUpdateApp"] is None
    assert body["errors"][0]["message"] == message
    assert error_code(body) == "BAD_USER_INPUT"


def test_user_app_is_forbidden_for_non_members_whether_or_not_it_exists(client, other_user, member_app):
    body = graphql(
        client,
        f'query {{ existing: userApp(appId: "{member_app["id"]}") {{ id }} }}',
        token=other_user["token"],
    )
    missing = graphql(client, 'query { userApp(appId: "does-not-exist") { id } }', token=other_user["token"])
    assert error_code(body) == "FORBIDDEN"
    assert error_code(missing) == "FORBIDDEN"
    assert body["errors"][0]["message"] == missing["errors"][0]["message"]


def test_reads_are_repeatable(client, user, member_app):
    env_id = member_app["envs"][0]["id"]
    queries = [
        f'query {{ userApp(appId: "{member_app["id"]}") {{ id index name envs {{ id clusterId }} }} }}',
        f'query {{ userAppEnv(appId: "{member_app["id"]}", appEnvId: "{env_id}") '
        "{ id name appId clusterId mints { id address } } }",
        'query { userCluster(clusterId: "solana-devnet") { id name status mints { id address } } }',
    ]
    for query in queries:
        first = graphql(client, query, token=user["token"])
        second = graphql(client, query, token=user["token"])
        assert "errors" not in first, first
        assert first == second
