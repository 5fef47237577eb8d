from medterm.services.importer import PALETTE, merge_category_names


def test_merge_category_names():
    assert merge_category_names(["Cardiology", " Neurology "], ["Neurology", 3, "", "Pediatrics"]) == [
        "Cardiology",
        "Neurology",
        "Pediatrics",
    ]
    assert merge_category_names(None, "Cardiology") == []


def test_import_terms_creates_categories_and_skips_bad_items(client, admin_headers):
    client.post("/api/categories", json={"name": "Cardiology"}, headers=admin_headers)
    client.post("/api/terms", json={"term": "Arthritis", "meaning": "m"}, headers=admin_headers)

    res = client.post(
        "/api/terms/import",
        json={
            "globalCategories": ["Cardiology"],
            "items": [
                {"term": "Tachycardia", "meaning": "Rapid heart rate", "categories": ["Emergency"]},
                {"term": "Hypertension", "meaning": "High blood pressure", "pronunciation": "hy-per"},
                {"term": "NoMeaning"},
                {"term": "Arthritis", "meaning": "duplicate"},
                "not an object",
            ],
        },
        headers=admin_headers,
    )

    assert res.status_code == 200
    body = res.json()
    assert body["imported"] == 2
    assert body["skipped"] == 3
    assert [c["name"] for c in body["items"][0]["categories"]] == ["Cardiology", "Emergency"]

    categories = {c["name"]: c for c in client.get("/api/categories", headers=admin_headers).json()}
    assert set(categories) == {"Cardiology", "Emergency"}
    assert categories["Emergency"]["color"] in PALETTE


def test_import_phrases_accepts_bare_list(client, admin_headers):
    res = client.post(
        "/api/phrases/import",
        json=[{"phrase": "GERD", "explanation": "Gastroesophageal Reflux Disease"}, {"phrase": "UTI"}],
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert (res.json()["imported"], res.json()["skipped"]) == (1, 1)


def test_import_rejects_malformed_body(client, admin_headers):
    res = client.post("/api/terms/import", json={"items": "nope"}, headers=admin_headers)
    assert res.status_code == 400
