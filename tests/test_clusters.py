import pytest

from tests.helpers import MINT_PUBLIC_KEY, WRAPPED_SOL, error_code, graphql

CLUSTER_FIELDS = "id name type status endpoint mints { address symbol decimals default order }"

MINT_CREATE = """
mutation MintCreate($input: AdminMintCreateInput!) {
  adminMintCreate(input: $input) { id mints { address name symbol decimals logoUrl coinGeckoId default order } }
}
"""

UPDATE_CLUSTER = """
mutation UpdateCluster($clusterId: String!, $input: AdminClusterUpdateInput!) {
  adminUpdateCluster(clusterId: $clusterId, input: $input) { id name status endpoint }
}
"""


def test_user_clusters_lists_active_clusters(client, user):
    body = graphql(client, f"query {{ userClusters {{ {CLUSTER_FIELDS} }} }}", token=user["token"])
    clusters = body["data"]["userClusters"]
    assert [c["id"] for c in clusters] == ["solana-devnet", "solana-mainnet"]
    assert all(c["status"] == "Active" for c in clusters)


def test_admin_clusters_lists_every_cluster(client, admin_token):
    body = graphql(client, "query { adminClusters { id status } }", token=admin_token)
    ids = [c["id"] for c in body["data"]["adminClusters"]]
    assert ids == ["solana-custom", "solana-devnet", "solana-mainnet", "solana-testnet"]


def test_user_cluster_includes_default_mint(client, user):
    body = graphql(
        client,
        f'query {{ userCluster(clusterId: "solana-devnet") {{ {CLUSTER_FIELDS} }} }}',
        token=user["token"],
    )
    cluster = body["data"]["userCluster"]
    assert cluster["name"] == "Solana Devnet"
    assert cluster["type"] == "SolanaDevnet"
    assert cluster["endpoint"] == "https://api.devnet.solana.com"
    assert cluster["mints"][0] == {
        "address": MINT_PUBLIC_KEY,
        "symbol": "MOG",
        "decimals": 0,
        "default": True,
        "order": 0,
    }


def test_unknown_cluster_is_not_found(client, admin_token):
    body = graphql(client, 'query { adminCluster(clusterId: "solana-nope") { id } }', token=admin_token)
    assert body["data"]["adminCluster"] is None
    assert body["errors"][0]["message"] == "Cluster with id solana-nope not found"
    assert error_code(body) == "NOT_FOUND"


def test_admin_mint_create_returns_cluster_with_mints(client, admin_token):
    mint = {
        "address": WRAPPED_SOL,
        "clusterId": "solana-testnet",
        "decimals": 9,
        "name": "Wrapped SOL",
        "symbol": "SOL",
        "logoUrl": "https://example.com/sol.png",
        "coinGeckoId": "solana",
    }
    body = graphql(client, MINT_CREATE, {"input": mint}, admin_token)
    assert "errors" not in body, body
    cluster = body["data"]["adminMintCreate"]
    assert cluster["id"] == "solana-testnet"
    assert [m["symbol"] for m in cluster["mints"]] == ["MOG", "SOL"]
    created = cluster["mints"][1]
    assert created["default"] is False
    assert created["order"] == 1
    assert created["logoUrl"] == "https://example.com/sol.png"

    duplicate = graphql(client, MINT_CREATE, {"input": mint}, admin_token)
    assert error_code(duplicate) == "CONFLICT"


@pytest.mark.parametrize("override,message", [
    ({"address": "not-a-key"}, "address must be a valid public key"),
    ({"logoUrl": "not a url"}, "logoUrl must be a url"),
    ({"decimals": -1}, "decimals must not be negative"),
])
def test_admin_mint_create_validates_input(client, admin_token, override, message):
    mint = {
        "address": WRAPPED_SOL,
        "clusterId": "solana-mainnet",
        "decimals": 9,
        "name": "Wrapped SOL",
        "symbol": "SOL",
    }
    mint.update(override)
    body = graphql(client, MINT_CREATE, {"input": mint}, admin_token)
    assert body["errors"][0]["message"] == message
    assert error_code(body) == "BAD_USER_INPUT"


def test_admin_mint_create_on_unknown_cluster(client, admin_token):
    mint = {"address": WRAPPED_SOL, "clusterId": "solana-nope", "decimals": 9, "name": "Wrapped SOL", "symbol": "SOL"}
    body = graphql(client, MINT_CREATE, {"input": mint}, admin_token)
    assert error_code(body) == "NOT_FOUND"


def test_admin_update_cluster(client, admin_token, user):
    body = graphql(
        client,
        UPDATE_CLUSTER,
        {"clusterId": "solana-custom", "input": {"status": "Active", "endpoint": "http://localhost:8890"}},
        admin_token,
    )
    assert body["data"]["adminUpdateCluster"] == {
        "id": "solana-custom",
        "name": "Solana Custom",
        "status": "Active",
        "endpoint": "http://localhost:8890",
    }
    active = graphql(client, "query { userClusters { id } }", token=user["token"])
    assert "solana-custom" in [c["id"] for c in active["data"]["userClusters"]]

    body = graphql(
        client,
        UPDATE_CLUSTER,
        {"clusterId": "solana-custom", "input": {"status": "Inactive", "endpoint": "http://localhost:8899"}},
        admin_token,
    )
    assert body["data"]["adminUpdateCluster"]["status"] == "Inactive"


def test_admin_update_cluster_rejects_bad_endpoint(client, admin_token):
    body = graphql(
        client,
        UPDATE_CLUSTER,
        {"clusterId": "solana-custom", "input": {"endpoint": "localhost"}},
        admin_token,
    )
    assert body["errors"][0]["message"] == "endpoint must be a url"


@pytest.mark.parametrize("field", ["name", "status", "endpoint"])
def test_admin_update_cluster_rejects_null(client, admin_token, field):
    body = graphql(client, UPDATE_CLUSTER, {"clusterId": "solana-custom", "input": {field: None}}, admin_token)
    assert body["data"]["adminUpdateCluster"] is None
    assert body["errors"][0]["message"] == f"{field} must not be null"
    assert error_code(body) == "BAD_USER_INPUT"
