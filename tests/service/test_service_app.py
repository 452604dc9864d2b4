"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from mergegen.sections.markers import STYLES
from mergegen.service import create_app

BEGIN = "BEGIN-MANUAL-SECTION"
END = "END-MANUAL-SECTION"


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_merge_endpoint(client: TestClient) -> None:
    response = client.post(
        "/merge",
        json={
            "generated": f"v2\n{BEGIN} new\nstub\n{END}",
            "existing": f"v1\n{BEGIN} old\nmine\n{END}",
            "rekeys": {"new": ["old"]},
        },
    )
    assert response.status_code == 200
    assert response.json() == {"merged": f"v2\n{BEGIN} new\nmine\n{END}"}


def test_extract_endpoint(client: TestClient) -> None:
    response = client.post("/extract", json={"code": f"a\n{BEGIN} f\nmine\n{END}"})
    assert response.status_code == 200
    assert response.json() == {"generated": f"a\n{BEGIN} f\n{END}"}


def test_validate_endpoint_reports_parse_errors(client: TestClient) -> None:
    ok = client.post("/validate", json={"code": f"{BEGIN} f\n{END}"})
    assert ok.status_code == 200
    assert ok.json() == {"valid": True}

    response = client.post("/validate", json={"code": f"{BEGIN} bad-id\n{END}"})
    assert response.status_code == 422
    data = response.json()
    assert data["kind"] == "invalid_section_id"
    assert data["line_number"] == 1
    assert data["section_id"] == "bad-id"


def test_style_factory_is_used() -> None:
    style = STYLES["xml"]
    client = TestClient(create_app(lambda: style))
    code = f"{style.begin_marker('doc')}\nmine\n{style.end_marker()}"
    response = client.post("/merge", json={"generated": code.replace("mine", "stub"), "existing": code})
    assert response.json() == {"merged": code}


def test_configured_rekeys_apply_and_request_rekeys_override() -> None:
    client = TestClient(create_app(rekeys={"new": ["configured"]}))
    existing = f"{BEGIN} configured\nfrom config\n{END}\n{BEGIN} other\nfrom request\n{END}"
    generated = f"{BEGIN} new\nstub\n{END}"

    response = client.post("/merge", json={"generated": generated, "existing": existing})
    assert response.json() == {"merged": f"{BEGIN} new\nfrom config\n{END}"}

    response = client.post(
        "/merge",
        json={"generated": generated, "existing": existing, "rekeys": {"new": ["other"]}},
    )
    assert response.json() == {"merged": f"{BEGIN} new\nfrom request\n{END}"}
