"""Shared GraphQL helpers for the API tests."""
import itertools

MINT_PUBLIC_KEY = "MoGaMiMint1111111111111111111111111111111"
WRAPPED_SOL = "So11111111111111111111111111111111111111112"
ADMIN_PASSWORD = "admin-password"
USER_PASSWORD = "user-password"

LOGIN = """
mutation Login($input: UserLoginInput!) {
  login(input: $input) { token user { id username role } }
}
"""

CREATE_APP = """
mutation CreateApp($input: AdminAppCreateInput!) {
  adminCreateApp(input: $input) {
    id index name
    envs { id name clusterId cluster { id status } mints { id address symbol addMemo order mint { id } } }
    users { role user { username } }
  }
}
"""

_app_index = itertools.count(1)


def graphql(client, query, variables=None, token=None):
    """POST a GraphQL operation; the endpoint answers 200 even for errors"""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    response = client.post(
        "/api/graphql",
        json={"query": query, "variables": variables or {}},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


def error_code(body):
    return body["errors"][0]["extensions"]["code"]


def login(client, username, password):
    body = graphql(client, LOGIN, {"input": {"username": username, "password": password}})
    assert "errors" not in body, body
    return body["data"]["login"]["token"]


def next_app_index():
    return next(_app_index)
