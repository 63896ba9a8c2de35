"""Integration tests for the TTS endpoint and the media mount."""


def test_generate_then_serve(client, fake_engine):
    response = client.post("/tts/generate", json={"text": "Bon dia", "language": "ca-ES"})
    assert response.status_code == 200
    body = response.json()
    assert body["cached"] is False
    assert body["url"].startswith("http://testserver/media/audio/ca-ES/")

    media = client.get(body["url"].removeprefix("http://testserver"))
    assert media.status_code == 200
    assert media.content == fake_engine.payload

    again = client.post("/tts/generate", json={"text": "bon dia", "language": "ca-ES"}).json()
    assert again == {"url": body["url"], "cached": True}


def test_invalid_argument(client):
    response = client.post("/tts/generate", json={"text": "hola", "language": "fr-FR"})
    assert response.status_code == 400
    assert response.json()["code"] == "invalid-argument"

    response = client.post("/tts/generate", json={"language": "ca-ES"})
    assert response.status_code == 400


def test_engine_failure(client, fake_engine):
    fake_engine.error = RuntimeError("boom")
    response = client.post("/tts/generate", json={"text": "hola", "language": "en-US"})
    assert response.status_code == 500
    assert response.json() == {"code": "internal", "message": "Failed to generate audio"}
