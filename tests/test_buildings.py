from __future__ import annotations

import pytest

from propdocs.dependencies.compliance import get_required_document_types
from propdocs.main import app
from propdocs.services.gaps import RequiredDocumentType, required_types_from_keys

pytestmark = pytest.mark.integration


def test_list_buildings_returns_own_tenant_only(client, auth_context, seeded, other_tenant_building):
    response = client.get("/buildings")
    assert response.status_code == 200
    payload = response.json()
    assert [item["name"] for item in payload["items"]] == ["Bostäder Lönnen", "Kontor Eken", "Skola Björken"]
    assert other_tenant_building not in {item["id"] for item in payload["items"]}


def test_list_buildings_search(client, auth_context, seeded):
    response = client.get("/buildings", params={"search": "  eken "})
    assert response.status_code == 200
    payload = response.json()
    assert payload["search"] == "eken"
    assert [item["name"] for item in payload["items"]] == ["Kontor Eken"]


def test_building_detail_reports_gaps_and_documents(client, auth_context, seeded):
    response = client.get("/buildings/1")
    assert response.status_code == 200
    payload = response.json()

    assert payload["building"] == {"id": 1, "name": "Skola Björken", "address": "Björkgatan 12, Göteborg"}
    assert payload["reference_year"] == 2024
    assert payload["filters"] == {"type": "", "status": "", "year": ""}
    assert len(payload["documents"]) == 10
    assert payload["gaps"] == [
        {
            "document_type": "brandskydd",
            "severity": "uncertain",
            "message": "Flera BRANDSKYDD – osäkert vilken som gäller",
        }
    ]
    assert payload["compliant"] is False
    assert [item["key"] for item in payload["required_types"]] == ["ritning", "OVK", "brandskydd", "service"]
    assert payload["available_years"][0] == 2022


def test_building_detail_filters_do_not_change_gaps(client, auth_context, seeded):
    unfiltered = client.get("/buildings/3").json()

    response = client.get("/buildings/3", params={"type": "service", "status": "gällande"})
    assert response.status_code == 200
    payload = response.json()

    assert [(d["document_type"], d["year"]) for d in payload["documents"]] == [("service", 2023)]
    assert payload["documents"][0]["status_label"] == "✅ Gällande"
    assert payload["filters"] == {"type": "service", "status": "gällande", "year": ""}
    assert payload["gaps"] == unfiltered["gaps"]
    assert [g["severity"] for g in payload["gaps"]] == ["stale", "uncertain", "missing"]


def test_building_detail_year_and_status_name_filters(client, auth_context, seeded):
    response = client.get("/buildings/2", params={"year": "2019", "status": "uncertain"})
    assert response.status_code == 200
    documents = response.json()["documents"]
    assert [(d["document_type"], d["status"]) for d in documents] == [("OVK", "osäker")]


def test_building_detail_empty_filters_mean_no_filter(client, auth_context, seeded):
    response = client.get("/buildings/1", params={"type": "", "status": "", "year": ""})
    assert response.status_code == 200
    assert len(response.json()["documents"]) == 10


@pytest.mark.parametrize("params", [{"year": "tjugo"}, {"status": "arkiverad"}])
def test_building_detail_rejects_malformed_filters(client, auth_context, seeded, params):
    response = client.get("/buildings/1", params=params)
    assert response.status_code == 400


def test_building_of_other_tenant_is_not_found(client, auth_context, seeded, other_tenant_building):
    response = client.get(f"/buildings/{other_tenant_building}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Byggnaden hittades inte"

    gaps = client.get(f"/buildings/{other_tenant_building}/gaps")
    assert gaps.status_code == 404


def test_gaps_endpoint(client, auth_context, seeded):
    response = client.get("/buildings/2/gaps")
    assert response.status_code == 200
    payload = response.json()
    assert payload["building"]["name"] == "Kontor Eken"
    assert payload["compliant"] is False
    assert [(g["document_type"], g["severity"]) for g in payload["gaps"]] == [
        ("OVK", "stale"),
        ("OVK", "uncertain"),
        ("service", "uncertain"),
    ]
    assert payload["document_counts"] == {"ritning": 3, "OVK": 2, "brandskydd": 2, "service": 2}


def test_required_types_come_from_configuration(client, auth_context, seeded):
    app.dependency_overrides[get_required_document_types] = lambda: required_types_from_keys(["service"]) + [
        RequiredDocumentType(key="energideklaration", label="Energideklaration")
    ]
    try:
        response = client.get("/buildings/1/gaps")
    finally:
        app.dependency_overrides.pop(get_required_document_types, None)

    assert response.status_code == 200
    assert response.json()["gaps"] == [
        {"document_type": "energideklaration", "severity": "missing", "message": "Energideklaration saknas"}
    ]


def test_reference_year_drives_staleness(client, auth_context, seeded, fixed_reference_year):
    from propdocs.dependencies.compliance import get_reference_year

    app.dependency_overrides[get_reference_year] = lambda: 2026
    response = client.get("/buildings/1/gaps")
    assert response.status_code == 200
    # OVK 2020 and ritning/brandskydd 2021 reach the five-year window in 2026
    assert [(g["document_type"], g["severity"]) for g in response.json()["gaps"]] == [
        ("ritning", "stale"),
        ("OVK", "stale"),
        ("brandskydd", "stale"),
        ("brandskydd", "uncertain"),
    ]


def test_missing_required_type_in_store_result_is_a_server_error(client, auth_context, seeded, monkeypatch):
    from propdocs.services.document_store import DocumentStore

    monkeypatch.setattr(DocumentStore, "documents_by_type", lambda self, building_id, keys: {})
    response = client.get("/buildings/1/gaps")
    assert response.status_code == 500
    assert response.json()["detail"] == "Konfigurationsfel"
