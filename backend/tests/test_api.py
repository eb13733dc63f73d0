"""End-to-end flows through the HTTP surface."""
import asyncio

from leadlens.config import settings

from .conftest import ALWAYS


async def create_project(client, name="Acme Robotics"):
    response = await client.post("/projects", json={"name": name, "lead_source": "Referral"})
    assert response.status_code == 200
    return response.json()


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_missing_user_header_is_unauthorized(client):
    response = await client.get("/projects", headers={"X-User-Id": ""})
    assert response.status_code == 401


async def test_project_crud_and_archive(client):
    project = await create_project(client)
    assert project["status"] == "draft"
    assert project["priority"] == "medium"

    response = await client.patch(f"/projects/{project['id']}", json={"progress": 40, "priority": "high"})
    assert response.json()["progress"] == 40

    response = await client.post(f"/projects/{project['id']}/archive")
    assert response.json()["status"] == "completed"

    response = await client.get("/projects", headers={"X-User-Id": "someone-else"})
    assert response.json()["total"] == 0

    response = await client.delete(f"/projects/{project['id']}")
    assert response.status_code == 200
    assert (await client.get(f"/projects/{project['id']}")).status_code == 404


async def test_context_items_and_grounding_preview(client):
    project = await create_project(client)
    base = f"/projects/{project['id']}/context"

    preview = (await client.get(f"{base}/grounding")).json()
    assert preview["available"] is False
    assert preview["warning"]

    await client.post(base, json={"content_type": "text", "content": "Needs SOC 2."})
    await client.post(base, json={
        "content_type": "document",
        "content": "https://files/abc.pdf",
        "metadata": {"name": "abc.pdf", "original_name": "RFP.pdf"},
    })

    items = (await client.get(base)).json()
    assert items["total"] == 2
    assert items["items"][1]["metadata"]["original_name"] == "RFP.pdf"

    preview = (await client.get(f"{base}/grounding")).json()
    assert preview["item_count"] == 2
    assert "Content: Needs SOC 2." in preview["text"]
    assert "File: RFP.pdf" in preview["text"]

    response = await client.delete(f"{base}/{items['items'][0]['id']}")
    assert response.status_code == 200
    assert (await client.get(f"{base}/grounding")).json()["item_count"] == 1


async def test_blank_context_item_is_rejected(client):
    project = await create_project(client)
    response = await client.post(
        f"/projects/{project['id']}/context", json={"content_type": "text", "content": "   "}
    )
    assert response.status_code == 422


async def test_conversation_flow(client, primary):
    project = await create_project(client)
    await client.post(
        f"/projects/{project['id']}/context", json={"content_type": "text", "content": "Budget is 50k."}
    )

    response = await client.post("/conversations", json={"project_id": project["id"], "title": "Prep"})
    assert response.status_code == 200
    conversation_id = response.json()["id"]

    detail = (await client.get(f"/conversations/{conversation_id}")).json()
    assert detail["messages"] == []
    assert detail["context_item_count"] == 1

    response = await client.post(f"/conversations/{conversation_id}/messages", json={"message": "Budget?"})
    body = response.json()
    assert response.status_code == 200
    assert body["reply_failed"] is False
    assert [m["role"] for m in body["messages"]] == ["user", "assistant"]
    assert "Budget is 50k." in primary.prompts[0]

    response = await client.post(f"/conversations/{conversation_id}/messages", json={"message": "  "})
    assert response.status_code == 400

    response = await client.patch(f"/conversations/{conversation_id}", json={"title": "Renamed"})
    assert response.json()["title"] == "Renamed"

    listing = (await client.get("/conversations", params={"project_id": project["id"]})).json()
    assert listing["total"] == 1

    response = await client.delete(f"/conversations/{conversation_id}")
    assert response.status_code == 200
    assert (await client.get(f"/conversations/{conversation_id}")).status_code == 404


async def test_failed_reply_is_reported_not_raised(client, primary, secondary):
    primary.fail_times = secondary.fail_times = 10**6
    project = await create_project(client)
    conversation_id = (
        await client.post("/conversations", json={"project_id": project["id"], "title": "Flaky"})
    ).json()["id"]

    response = await client.post(f"/conversations/{conversation_id}/messages", json={"message": "Hi"})
    body = response.json()
    assert response.status_code == 200
    assert body["reply_failed"] is True
    assert [m["role"] for m in body["messages"]] == ["user"]


async def test_conversation_survives_project_deletion(client):
    project = await create_project(client)
    conversation_id = (
        await client.post("/conversations", json={"project_id": project["id"], "title": "Orphan"})
    ).json()["id"]
    await client.post(
        f"/projects/{project['id']}/context", json={"content_type": "text", "content": "Budget is 50k."}
    )
    await client.post(f"/conversations/{conversation_id}/messages", json={"message": "Budget?"})
    await client.delete(f"/projects/{project['id']}")

    detail = (await client.get(f"/conversations/{conversation_id}")).json()
    assert detail["project_missing"] is True
    assert detail["context_available"] is False
    assert detail["context_item_count"] == 0
    assert [m["role"] for m in detail["messages"]] == ["user", "assistant"]


async def test_personas_default(client):
    first = (await client.post("/personas", json={
        "persona_name": "Dana", "role_title": "AE", "is_default": True,
    })).json()
    second = (await client.post("/personas", json={"persona_name": "Lee", "role_title": "SDR"})).json()

    response = await client.post(f"/personas/{second['id']}/default")
    assert response.json()["is_default"] is True

    personas = (await client.get("/personas")).json()["personas"]
    assert [p["id"] for p in personas if p["is_default"]] == [second["id"]]
    assert first["id"] in [p["id"] for p in personas]

    assert (await client.post("/personas/missing/default")).status_code == 404


async def test_tool_workspace_flow(client, primary):
    project = await create_project(client)

    catalog = (await client.get("/tools/marketing")).json()
    assert catalog["tools"][0]["kind"] == "ad-copy"

    response = await client.post("/tools/marketing/generate")
    assert response.status_code == 400

    response = await client.patch("/tools/marketing/workspace", json={
        "tool": "content-repurposer", "project_id": project["id"],
    })
    assert response.json()["selected_tool"] == "content-repurposer"

    response = await client.post("/tools/marketing/generate")
    assert response.status_code == 400
    assert primary.calls == 0

    await client.patch("/tools/marketing/workspace", json={"fields": {"source_text": "Our launch post."}})
    response = await client.post("/tools/marketing/generate")
    assert response.status_code == 200
    assert response.json() == {"tool": "content-repurposer", "content": "primary reply"}

    response = await client.post("/tools/marketing/regenerate", json={"instruction": "Shorter"})
    assert response.status_code == 200

    workspace = (await client.get("/tools/marketing/workspace")).json()
    assert workspace["result"] == "primary reply"
    assert workspace["hint"] == ""

    results = (await client.get("/tools/marketing/results")).json()
    assert list(results["results"]) == ["content-repurposer"]


async def test_assistant_has_no_tool_workspace(client):
    assert (await client.get("/tools/assistant/workspace")).status_code == 404


async def test_generation_exhausted_is_bad_gateway(client, primary, secondary):
    primary.fail_times = secondary.fail_times = 10**6
    project = await create_project(client)
    await client.patch("/tools/sales/workspace", json={"project_id": project["id"]})

    response = await client.post("/tools/sales/generate")
    assert response.status_code == 502


async def test_grounding_limit_is_enforced(client, monkeypatch):
    monkeypatch.setattr(settings, "grounding_max_chars", 100)
    project = await create_project(client)
    await client.post(
        f"/projects/{project['id']}/context", json={"content_type": "text", "content": "x" * 500}
    )
    await client.patch("/tools/sales/workspace", json={"project_id": project["id"]})

    response = await client.post("/tools/sales/generate")
    assert response.status_code == 413


async def test_project_summary_falls_back_on_failure(client, primary, secondary):
    primary.fail_times = secondary.fail_times = 10**6
    project = await create_project(client)

    response = await client.post(f"/projects/{project['id']}/summary")
    assert response.status_code == 200
    assert response.json()["context_summary"].startswith("Project: Acme Robotics.")


async def test_artifacts_listing(client, monkeypatch):
    monkeypatch.setattr(settings, "persist_generated_artifacts", True)
    project = await create_project(client)
    await client.patch("/tools/sales/workspace", json={"project_id": project["id"]})
    await client.post("/tools/sales/generate")

    listing = (await client.get(f"/projects/{project['id']}/artifacts")).json()
    assert listing["total"] == 1
    assert listing["artifacts"][0]["tool_kind"] == "cold-email"


async def test_url_item_with_malformed_scraped_data_is_rejected(client):
    project = await create_project(client)
    base = f"/projects/{project['id']}/context"

    response = await client.post(base, json={
        "content_type": "url", "content": "https://acme.example.com", "metadata": {"scraped_data": "oops"},
    })
    assert response.status_code == 422

    response = await client.post(base, json={
        "content_type": "url", "content": "https://acme.example.com", "metadata": {"key_points": 7},
    })
    assert response.status_code == 422

    response = await client.post(base, json={
        "content_type": "url",
        "content": "https://acme.example.com",
        "metadata": {"scraped_data": {"title": "Acme", "keyPoints": "Series B"}},
    })
    assert response.status_code == 200
    preview = (await client.get(f"{base}/grounding")).json()
    assert "Key Points: Series B" in preview["text"]


async def test_conversation_reply_can_be_cancelled(client, primary, secondary):
    primary.fail_times = ALWAYS
    primary.delay = 0.1
    project = await create_project(client)
    conversation_id = (
        await client.post("/conversations", json={"project_id": project["id"], "title": "Cancel me"})
    ).json()["id"]

    response = await client.post(f"/conversations/{conversation_id}/cancel")
    assert response.json() == {"conversation_id": conversation_id, "cancelled": False}

    sending = asyncio.create_task(
        client.post(f"/conversations/{conversation_id}/messages", json={"message": "Long plan please"})
    )
    while primary.calls == 0:
        await asyncio.sleep(0.01)

    detail = (await client.get(f"/conversations/{conversation_id}")).json()
    assert detail["state"] == "generating"

    response = await client.post(f"/conversations/{conversation_id}/cancel")
    assert response.json()["cancelled"] is True

    body = (await sending).json()
    assert body["reply_failed"] is True
    assert [m["role"] for m in body["messages"]] == ["user"]
    assert primary.calls == 1
    assert secondary.calls == 0

    assert (await client.post("/conversations/missing/cancel")).status_code == 404


async def test_tool_generation_can_be_cancelled(client, primary, secondary):
    primary.fail_times = ALWAYS
    primary.delay = 0.1
    project = await create_project(client)
    await client.patch("/tools/sales/workspace", json={"project_id": project["id"]})

    generating = asyncio.create_task(client.post("/tools/sales/generate"))
    while primary.calls == 0:
        await asyncio.sleep(0.01)

    response = await client.post("/tools/sales/cancel")
    assert response.json() == {"surface": "sales", "cancelled": True}

    response = await generating
    assert response.status_code == 409
    assert secondary.calls == 0

    response = await client.post("/tools/sales/cancel")
    assert response.json()["cancelled"] is False
    assert (await client.get("/tools/sales/workspace")).json()["generating"] is False
    assert (await client.post("/tools/assistant/cancel")).status_code == 404
