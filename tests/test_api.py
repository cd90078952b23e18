import pytest

from api import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["status"] == "ok"
    assert "2021" in data["supported_code_editions"]


def test_standards(client):
    data = client.get("/api/standards").get_json()
    assert data["success"] is True
    assert {c["campus_type"] for c in data["campus_standards"]} == {"elementary", "middle", "high"}
    editions = {e["edition"]: e for e in data["code_editions"]}
    assert editions["2021"]["df_exempt_threshold"] == 30
    assert len(data["flexibility_levels"]) == 4


def test_defaults(client):
    data = client.get("/api/defaults/high").get_json()
    assert data["default_class_size"] == 25
    assert data["advanced"]["utilization"] == 0.8
    assert data["advanced"]["elective_rooms"] == 6
    assert client.get("/api/defaults/college").status_code == 400


def test_calculate_elementary(client):
    resp = client.post("/api/calculate", json={
        "campus_type": "elementary", "students": 750, "flexibility_level": "L2",
        "code_edition": "2021",
    })
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["success"] is True
    assert data["class_size"] == 22
    assert data["rooms"][0]["count"] == 35
    assert data["aggregate_sf"] == 27000
    assert data["gross_sf"] == 97399
    assert data["disclaimer"]
    assert "download_id" not in data


def test_calculate_clamps_numbers(client):
    data = client.post("/api/calculate", json={
        "campus_type": "middle", "students": "900", "class_size": 99,
        "gross_factor": 9, "advanced": {"utilization": "abc"},
    }).get_json()
    assert data["class_size"] == 25
    assert data["gross_factor"] == 1.7


def test_calculate_zero_enrollment(client):
    data = client.post("/api/calculate", json={"campus_type": "high", "students": 0}).get_json()
    assert data["success"] is True
    assert data["rooms"] == []
    assert data["net_sf"] == 0


@pytest.mark.parametrize("field, value", [
    ("campus_type", "college"),
    ("flexibility_level", "L9"),
    ("compliance_method", "vibes"),
    ("code_edition", "2009"),
])
def test_calculate_rejects_unknown_enums(client, field, value):
    resp = client.post("/api/calculate", json={"students": 500, field: value})
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_calculate_requires_json(client):
    assert client.post("/api/calculate", data="nope").status_code == 400


def test_excel_download_roundtrip(client):
    data = client.post("/api/calculate", json={
        "campus_type": "elementary", "students": 400, "export_excel": True,
    }).get_json()
    dl = client.get(data["download_url"])
    assert dl.status_code == 200
    assert dl.data[:2] == b"PK"


def test_download_rejects_bad_ids(client):
    assert client.get("/api/download/not-a-uuid").status_code == 400
    missing = client.get("/api/download/00000000-0000-0000-0000-000000000000")
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "File not found."


def test_batch(client):
    resp = client.post("/api/calculate/batch", json={
        "project_name": "District",
        "export_excel": True,
        "scenarios": [
            {"name": "Base", "campus_type": "middle", "students": 900},
            {"name": "Bad",  "campus_type": "college", "students": 900},
        ],
    })
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["scenarios_ok"] == 1
    assert data["scenarios_failed"] == 1
    assert [c["name"] for c in data["comparison"]] == ["Base"]
    assert "download_id" in data


def test_batch_validation(client):
    assert client.post("/api/calculate/batch", json={}).status_code == 400
    assert client.post("/api/calculate/batch", json={"scenarios": []}).status_code == 400


def test_unknown_endpoint(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Endpoint not found."


@pytest.mark.parametrize("flag, expected_credit", [
    ("false", 0), ("0", 0), ("no", 0), (False, 0),
    ("true", 4500), (True, 4500),
])
def test_cafeteria_credit_flag_is_parsed_strictly(client, flag, expected_credit):
    data = client.post("/api/calculate", json={
        "campus_type": "elementary", "students": 750, "class_size": 22,
        "compliance_method": "qualitative", "cafeteria_credit": flag,
    }).get_json()
    assert data["success"] is True
    assert data["cafeteria_instructional_credit"] == expected_credit


def test_numeric_code_edition_accepted(client):
    data = client.post("/api/calculate", json={
        "campus_type": "high", "students": 100, "code_edition": 2018,
    }).get_json()
    assert data["success"] is True
    assert data["code_edition"] == "2018"
