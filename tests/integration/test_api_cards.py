"""Integration tests for the card collection endpoints."""


def create(client, front="water", back="aigua", **extra):
    return client.post("/cards", json={"front": front, "back": back, **extra})


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestCrud:
    def test_create_and_fetch(self, client):
        response = create(client, notes="Feminine")
        assert response.status_code == 201
        card = response.json()
        assert card["gender"] == "feminine"
        assert card["category"] == "Nouns"

        fetched = client.get(f"/cards/{card['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == card

    def test_duplicate_is_rejected(self, client):
        create(client)
        assert create(client, front="Water").status_code == 409

    def test_blank_front_is_invalid(self, client):
        assert create(client, front="").status_code == 422

    def test_list_filters_and_pages(self, client):
        create(client, "to be", "ser", category="Verbs")
        create(client, "to have", "tenir", category="Verbs")
        create(client, "house", "casa")
        body = client.get("/cards", params={"category": "Verbs", "limit": 1}).json()
        assert body["total"] == 2
        assert len(body["items"]) == 1

    def test_patch_and_mnemonic(self, client):
        card = create(client).json()
        patched = client.patch(f"/cards/{card['id']}", json={"notes": "drink it"})
        assert patched.json()["notes"] == "drink it"

        response = client.put(f"/cards/{card['id']}/mnemonic", json={"mnemonic": "eye-gwa"})
        assert response.status_code == 200
        assert response.json()["mnemonic"] == "eye-gwa"
        assert client.get(f"/cards/{card['id']}").json()["mnemonic"] == "eye-gwa"

    def test_delete(self, client):
        card = create(client).json()
        assert client.delete(f"/cards/{card['id']}").status_code == 204
        assert client.get(f"/cards/{card['id']}").status_code == 404
        assert client.delete(f"/cards/{card['id']}").status_code == 404

    def test_unknown_card(self, client):
        assert client.get("/cards/missing").status_code == 404
        assert client.patch("/cards/missing", json={"notes": "x"}).status_code == 404


class TestImportExport:
    def test_import_then_reimport(self, client, sample_csv):
        files = {"file": ("vocab.csv", sample_csv.encode(), "text/csv")}
        first = client.post("/cards/import", files=files)
        assert first.json() == {"imported": 3, "skipped": 0}

        files = {"file": ("vocab.csv", sample_csv.encode(), "text/csv")}
        second = client.post("/cards/import", files=files)
        assert second.json() == {"imported": 0, "skipped": 3}

    def test_bad_csv(self, client):
        files = {"file": ("bad.csv", b"English,Catalan\nwater,aigua\n", "text/csv")}
        response = client.post("/cards/import", files=files)
        assert response.status_code == 400
        assert "Front" in response.json()["detail"]

    def test_non_utf8(self, client):
        files = {"file": ("bad.csv", "Front,Back\ncafé,cafè\n".encode("latin-1"), "text/csv")}
        assert client.post("/cards/import", files=files).status_code == 400

    def test_export(self, client):
        create(client, "hello, friend", "hola, amic")
        response = client.get("/cards/export")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.text == 'Front,Back,Notes\n"hello, friend","hola, amic",'


class TestCollectionTools:
    def test_starter_vocabulary_is_idempotent(self, client):
        first = client.post("/cards/starter").json()
        assert first["imported"] > 0
        assert first["skipped"] == 0
        second = client.post("/cards/starter").json()
        assert second == {"imported": 0, "skipped": first["imported"]}

    def test_category_stats(self, client):
        create(client, "to be", "ser", category="Verbs")
        create(client, "house", "casa")
        stats = client.get("/cards/stats/categories").json()
        assert stats["Verbs"] == {"total": 1, "mastered": 0, "learning": 0}
        assert stats["Vocabulary"]["total"] == 1

    def test_deduplicate_with_nothing_to_remove(self, client):
        create(client)
        assert client.post("/cards/deduplicate").json() == {"removed": 0}
