"""Integration tests for template and prompt assembly endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.integration
class TestTemplates:
    async def test_list_builtins(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get("/v1/templates", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert len(data["builtin"]) == 7
        assert data["custom"] == []
        assert data["total"] == 7

    async def test_search(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.get("/v1/templates", params={"search": "EMAIL"}, headers=auth_headers)
        assert [t["id"] for t in response.json()["builtin"]] == ["email-draft"]

    async def test_options(self, client: AsyncClient, auth_headers: dict) -> None:
        data = (await client.get("/v1/templates/options", headers=auth_headers)).json()
        assert data["tones"][0] == "Professional"
        assert "Markdown" in data["formats"]

    async def test_custom_template_lifecycle(self, client: AsyncClient, auth_headers: dict) -> None:
        created = await client.post(
            "/v1/templates",
            json={
                "name": "Release notes",
                "base_prompt": "Summarize [changes] for [AUDIENCE].",
                "variables": [
                    {"key": "changes", "label": "Changes", "type": "textarea"},
                    {"key": "AUDIENCE", "label": "Audience"},
                ],
            },
            headers=auth_headers,
        )
        assert created.status_code == 201
        template = created.json()
        assert [v["key"] for v in template["variables"]] == ["CHANGES", "AUDIENCE"]

        second = (
            await client.post(
                "/v1/templates", json={"name": "Other", "base_prompt": "x"}, headers=auth_headers
            )
        ).json()

        updated = await client.put(
            f"/v1/templates/{template['id']}", json={"category": "Docs"}, headers=auth_headers
        )
        assert updated.json()["category"] == "Docs"

        reordered = await client.post(
            "/v1/templates/reorder",
            json={"ordered_ids": [second["id"], template["id"]]},
            headers=auth_headers,
        )
        assert [t["id"] for t in reordered.json()] == [second["id"], template["id"]]

        inputs = await client.get(f"/v1/templates/{template['id']}/inputs", headers=auth_headers)
        assert inputs.json()["variables"] == {"CHANGES": "", "AUDIENCE": ""}
        assert "negativeConstraints" in inputs.json()

        deleted = await client.delete(f"/v1/templates/{second['id']}", headers=auth_headers)
        assert deleted.status_code == 204
        listing = (await client.get("/v1/templates", headers=auth_headers)).json()
        assert [t["id"] for t in listing["custom"]] == [template["id"]]

    async def test_duplicate_keys_rejected(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/v1/templates",
            json={
                "name": "Dup",
                "base_prompt": "[A]",
                "variables": [{"key": "a", "label": "1"}, {"key": "A", "label": "2"}],
            },
            headers=auth_headers,
        )
        assert response.status_code == 400

    async def test_unknown_template(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.delete("/v1/templates/custom-0", headers=auth_headers)
        assert response.status_code == 404


@pytest.mark.integration
class TestAssemble:
    async def test_assemble_builtin(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/v1/prompts/assemble",
            json={
                "template_id": "email-draft",
                "inputs": {"persona": "a recruiter", "tone": "Friendly", "negativeConstraints": "slang"},
            },
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["prompt"].startswith("Act as a recruiter.\n\nYour task is to: ")
        assert "- Tone: Friendly" in data["prompt"]
        assert data["prompt"].endswith("IMPORTANT: Do NOT include the following:\n- slang")
        assert data["template_id"] == "email-draft"
        assert data["unfilled"]

    async def test_assemble_inline_template(self, client: AsyncClient, auth_headers: dict) -> None:
        response = await client.post(
            "/v1/prompts/assemble",
            json={
                "template": {
                    "id": "draft",
                    "name": "Draft",
                    "base_prompt": "Explain [X] twice: [X]",
                    "variables": [{"key": "X", "label": "Thing"}],
                },
                "inputs": {"variables": {"X": "recursion"}},
            },
            headers=auth_headers,
        )
        data = response.json()
        assert data["prompt"] == (
            "Your task is to: Explain recursion twice: [X]\n\n"
            "Please adhere to the following constraints:"
        )
        assert data["unfilled"] == []

    async def test_requires_exactly_one_template_source(
        self, client: AsyncClient, auth_headers: dict
    ) -> None:
        response = await client.post("/v1/prompts/assemble", json={"inputs": {}}, headers=auth_headers)
        assert response.status_code == 422
