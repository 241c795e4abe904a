import json

from mixology.errors import ProviderError


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_list_cocktails(client):
    response = client.get("/api/cocktails")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 10
    assert data[0]["name"] == "Mojito"
    assert data[0]["ingredients"][0] == {
        "id": 1,
        "name": "White rum",
        "amount": "2",
        "unit": "oz",
        "category": "Spirit",
    }


def test_list_ingredients(client):
    response = client.get("/api/ingredients")
    assert response.status_code == 200
    ingredients = response.json()["ingredients"]
    assert ingredients == sorted(ingredients)
    assert "Tonic water" in ingredients


def test_match_cocktails(client):
    response = client.post(
        "/api/cocktails/match",
        json={"ingredients": ["white rum", "lime", "mint leaves", "sugar", "soda water"], "limit": 2},
    )
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 2
    assert data[0]["name"] == "Mojito"
    assert data[0]["canMake"] is True
    assert data[0]["matchPercentage"] == 100
    assert data[0]["missingIngredients"] == []


def test_match_cocktails_requires_ingredients(client):
    response = client.post("/api/cocktails/match", json={"ingredients": []})
    assert response.status_code == 400


def test_suggestions(client, fake_provider):
    fake_provider.reply = json.dumps(
        [{"name": "Gin Fizz", "ingredients": ["2 oz Gin", "Soda water"], "instructions": "Shake. Top with soda."}]
    )
    response = client.post("/api/suggestions", json={"ingredients": ["gin", "soda water"], "count": 1})
    assert response.status_code == 200
    data = response.json()
    assert data["parseSucceeded"] is True
    assert data["strategy"] == "direct_json"
    suggestion = data["suggestions"][0]
    assert suggestion["name"] == "Gin Fizz"
    assert suggestion["ingredients"] == ["60 ml Gin", "Soda water"]
    assert suggestion["instructions"] == ["Shake.", "Top with soda."]
    assert suggestion["isCustom"] is True
    assert suggestion["youtubeVideos"] == []
    system, user = fake_provider.calls[0]
    assert "bartender" in system
    assert "gin, soda water" in user


def test_suggestions_unparseable_reply(client, fake_provider):
    fake_provider.reply = "I'm not sure."
    response = client.post("/api/suggestions", json={"ingredients": ["gin"]})
    assert response.status_code == 200
    data = response.json()
    assert data["parseSucceeded"] is False
    assert data["suggestions"][0]["name"] == "Default Cocktail"


def test_suggestions_requires_ingredients(client):
    response = client.post("/api/suggestions", json={"ingredients": ["  "]})
    assert response.status_code == 400


def test_suggestions_when_providers_fail(client, fake_provider):
    fake_provider.error = ProviderError("empty completion")
    response = client.post("/api/suggestions", json={"ingredients": ["gin"]})
    assert response.status_code == 503
    assert "fake" in response.json()["detail"]


def test_analyze_image(client, fake_provider):
    fake_provider.reply = "Lime, Gin, I can see a shaker\nFever-Tree Tonic Water"
    response = client.post("/api/analyze-image", json={"imageBase64": "data:image/png;base64,aGVsbG8="})
    assert response.status_code == 200
    assert response.json() == {"allDetected": ["Lime", "Gin", "Fever-Tree Tonic Water"]}
    assert fake_provider.calls[0][0] == "aGVsbG8="


def test_analyze_image_requires_image(client):
    response = client.post("/api/analyze-image", json={})
    assert response.status_code == 400


def test_analyze_image_when_providers_fail(client, fake_provider):
    fake_provider.error = ProviderError("empty completion")
    response = client.post("/api/analyze-image", json={"imageBase64": "aGVsbG8="})
    assert response.status_code == 503
