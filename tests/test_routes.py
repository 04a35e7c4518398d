"""HTTP-level tests: auth, error mapping and response shapes."""


def versions_url(seed) -> str:
    return f"/api/v1/projects/{seed.project_id}/prompts/{seed.prompt_id}/assets/{seed.asset_key}/versions"


def deployments_url(seed) -> str:
    return f"/api/v1/projects/{seed.project_id}/deployments"


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_missing_token_is_rejected(client, seed):
    response = await client.get(versions_url(seed))

    assert response.status_code in (401, 403)


async def test_invalid_token_is_unauthorized(client, seed):
    response = await client.get(versions_url(seed), headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


async def test_project_of_other_tenant_is_not_found(client, seed, make_tenant, auth_headers):
    other = await make_tenant("Globex")

    response = await client.get(versions_url(seed), headers=auth_headers(other.requester_id))

    assert response.status_code == 404


async def test_create_version_returns_camel_case(client, seed, auth_headers):
    response = await client.post(
        versions_url(seed),
        json={
            "versionTag": "1.0.0",
            "value": "Hello",
            "changeMessage": "first cut",
            "translations": [{"languageCode": "fr", "value": "Bonjour"}],
        },
        headers=auth_headers(seed.requester_id),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["versionTag"] == "1.0.0"
    assert body["changeMessage"] == "first cut"
    assert body["marketplaceStatus"] == "NOT_PUBLISHED"
    assert body["translations"] == [{"languageCode": "fr", "value": "Bonjour"}]
    assert response.headers["X-Request-Id"]


async def test_duplicate_version_maps_to_409(client, seed, auth_headers):
    payload = {"versionTag": "1.0.0", "value": "Hello"}
    headers = auth_headers(seed.requester_id)
    await client.post(versions_url(seed), json=payload, headers=headers)

    response = await client.post(versions_url(seed), json=payload, headers=headers)

    assert response.status_code == 409
    assert "1.0.0" in response.json()["detail"]


async def test_unknown_version_maps_to_404(client, seed, auth_headers):
    response = await client.get(versions_url(seed) + "/9.9.9", headers=auth_headers(seed.requester_id))

    assert response.status_code == 404


async def test_language_lookup_uses_query_parameter(client, seed, auth_headers):
    headers = auth_headers(seed.requester_id)
    await client.post(
        versions_url(seed),
        json={"versionTag": "1.0.0", "value": "Hello", "translations": [{"languageCode": "fr", "value": "Bonjour"}]},
        headers=headers,
    )

    found = await client.get(versions_url(seed) + "/1.0.0", params={"languageCode": "fr"}, headers=headers)
    missing = await client.get(versions_url(seed) + "/1.0.0", params={"languageCode": "es"}, headers=headers)

    assert found.status_code == 200
    assert missing.status_code == 404


async def test_delete_is_200_for_present_and_absent(client, seed, auth_headers):
    headers = auth_headers(seed.requester_id)
    created = await client.post(versions_url(seed), json={"versionTag": "1.0.0", "value": "Hello"}, headers=headers)

    first = await client.delete(versions_url(seed) + "/1.0.0", headers=headers)
    second = await client.delete(versions_url(seed) + "/1.0.0", headers=headers)

    assert first.status_code == 200
    assert first.json() == {"result": "deleted", "versionTag": "1.0.0", "versionId": created.json()["id"]}
    assert second.status_code == 200
    assert second.json() == {"result": "already_absent", "versionTag": "1.0.0", "versionId": None}


async def test_approve_from_not_published_maps_to_403(client, seed, auth_headers):
    headers = auth_headers(seed.requester_id)
    await client.post(versions_url(seed), json={"versionTag": "1.0.0", "value": "Hello"}, headers=headers)

    response = await client.post(versions_url(seed) + "/1.0.0/approve", headers=auth_headers(seed.approver_id))

    assert response.status_code == 403


async def test_reject_requires_reason(client, seed, auth_headers):
    headers = auth_headers(seed.requester_id)
    await client.post(versions_url(seed), json={"versionTag": "1.0.0", "value": "Hello"}, headers=headers)
    await client.post(versions_url(seed) + "/1.0.0/publish", headers=headers)

    without_reason = await client.post(versions_url(seed) + "/1.0.0/reject", json={}, headers=headers)
    rejected = await client.post(
        versions_url(seed) + "/1.0.0/reject", json={"reason": "Off brand"}, headers=auth_headers(seed.approver_id)
    )

    assert without_reason.status_code == 422
    assert rejected.status_code == 200
    assert rejected.json()["marketplaceStatus"] == "REJECTED"
    assert rejected.json()["marketplaceRejectionReason"] == "Off brand"


async def test_prompt_version_latest_route(client, seed, auth_headers):
    headers = auth_headers(seed.requester_id)
    url = f"/api/v1/projects/{seed.project_id}/prompts/{seed.prompt_id}/versions"
    await client.post(url, json={"versionTag": "v1", "promptText": "One"}, headers=headers)
    await client.post(url, json={"versionTag": "v2", "promptText": "Two"}, headers=headers)

    reserved = await client.post(url, json={"versionTag": "latest", "promptText": "Nope"}, headers=headers)
    latest = await client.get(url + "/latest", headers=headers)

    assert reserved.status_code == 400
    assert latest.json()["versionTag"] == "v2"


async def test_deployment_flow_over_http(client, seed, auth_headers):
    requester = auth_headers(seed.requester_id)
    approver = auth_headers(seed.approver_id)
    version = await client.post(versions_url(seed), json={"versionTag": "1.0.0", "value": "Hello"}, headers=requester)

    created = await client.post(
        deployments_url(seed),
        json={
            "environmentId": seed.environment_id,
            "name": "First release",
            "items": [
                {"entityType": "PROMPT_ASSET_VERSION", "entityId": version.json()["id"], "versionTag": "1.0.0"}
            ],
        },
        headers=requester,
    )
    assert created.status_code == 201
    deployment = created.json()
    assert deployment["status"] == "PENDING"
    assert deployment["environmentName"] == "production"
    assert deployment["items"][0]["riskLevel"] == "LOW"

    url = f"{deployments_url(seed)}/{deployment['id']}"
    assert (await client.post(url + "/deploy", headers=approver)).status_code == 400
    assert (await client.post(url + "/approve", headers=requester)).status_code == 403
    assert (await client.post(url + "/approve", headers=approver)).status_code == 200

    deployed = await client.post(url + "/deploy", headers=approver)
    assert deployed.status_code == 200
    assert deployed.json()["status"] == "DEPLOYED"
    assert deployed.json()["items"][0]["status"] == "DEPLOYED"

    active = await client.get(
        f"/api/v1/projects/{seed.project_id}/environments/{seed.environment_id}/active", headers=requester
    )
    assert active.json() == {
        "environmentId": seed.environment_id,
        "promptVersionIds": [],
        "assetVersionIds": [version.json()["id"]],
    }

    listed = await client.get(deployments_url(seed), params={"status": "DEPLOYED"}, headers=requester)
    assert [d["id"] for d in listed.json()] == [deployment["id"]]


async def test_invalid_entity_type_maps_to_400(client, seed, auth_headers):
    response = await client.post(
        deployments_url(seed),
        json={
            "environmentId": seed.environment_id,
            "name": "Bad",
            "items": [{"entityType": "WORKFLOW", "entityId": 1, "versionTag": "v1"}],
        },
        headers=auth_headers(seed.requester_id),
    )

    assert response.status_code == 400
    assert "WORKFLOW" in response.json()["detail"]


async def test_rollback_body_uses_camel_case(client, seed, auth_headers):
    response = await client.post(
        f"{deployments_url(seed)}/9999/rollback",
        json={"rollbackToDeploymentId": 1},
        headers=auth_headers(seed.requester_id),
    )

    assert response.status_code == 404


async def test_patch_with_explicit_null_is_rejected(client, seed, auth_headers):
    headers = auth_headers(seed.requester_id)
    await client.post(versions_url(seed), json={"versionTag": "1.0.0", "value": "Hello"}, headers=headers)

    response = await client.patch(f"{versions_url(seed)}/1.0.0", json={"value": None}, headers=headers)

    assert response.status_code == 422
    unchanged = await client.get(f"{versions_url(seed)}/1.0.0", headers=headers)
    assert unchanged.json()["value"] == "Hello"


async def test_patch_may_clear_change_message(client, seed, auth_headers):
    headers = auth_headers(seed.requester_id)
    await client.post(
        versions_url(seed),
        json={"versionTag": "1.0.0", "value": "Hello", "changeMessage": "first cut"},
        headers=headers,
    )

    response = await client.patch(f"{versions_url(seed)}/1.0.0", json={"changeMessage": None}, headers=headers)

    assert response.status_code == 200
    assert response.json()["changeMessage"] is None
    assert response.json()["value"] == "Hello"


async def test_duplicate_translation_language_is_rejected(client, seed, auth_headers):
    response = await client.post(
        versions_url(seed),
        json={
            "versionTag": "9.9.9",
            "value": "Hello",
            "translations": [
                {"languageCode": "fr", "value": "Bonjour"},
                {"languageCode": "fr", "value": "Salut"},
            ],
        },
        headers=auth_headers(seed.requester_id),
    )

    assert response.status_code == 422
    assert "already exists" not in response.text
