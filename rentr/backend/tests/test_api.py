# tests/test_api.py
TENANT = {"X-User-Id": "5", "X-User-Role": "tenant"}
OTHER_TENANT = {"X-User-Id": "6", "X-User-Role": "tenant"}
LANDLORD = {"X-User-Id": "900", "X-User-Role": "landlord"}

TORONTO_QUERY = {"budget": 200000, "city": "Toronto", "minBedrooms": 2, "moveIn": "2024-06-01"}


async def test_health(client):
    r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


async def test_missing_score_then_default_then_matches(client, toronto_listing):
    r = await client.get("/api/tenant-scores/5/property-matches", params=TORONTO_QUERY, headers=TENANT)
    assert r.status_code == 404
    assert r.json()["type"] == "NotFoundError"

    r = await client.post("/api/tenant-scores/me/default", headers=TENANT)
    assert r.status_code == 200
    created = r.json()
    assert created["tenantId"] == 5
    assert created["overallScore"] == 50
    assert created["active"] is True

    r = await client.post("/api/tenant-scores/me/default", headers=TENANT)
    assert r.json()["id"] == created["id"]

    r = await client.get("/api/tenant-scores/5/property-matches", params=TORONTO_QUERY, headers=TENANT)
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Found 1 property match"
    match = body["matches"][0]
    assert match["propertyId"] == toronto_listing.id
    assert match["matchPercentage"] == 100
    assert match["matchBreakdown"] == {
        "priceMatch": 100,
        "locationMatch": 100,
        "amenitiesMatch": 100,
        "sizeMatch": 100,
        "availabilityMatch": 100,
    }
    assert match["explanation"] == []


async def test_over_budget_listing_is_explained(client, toronto_listing):
    await client.post("/api/tenant-scores/me/default", headers=TENANT)

    r = await client.get(
        "/api/tenant-scores/5/property-matches",
        params={**TORONTO_QUERY, "budget": 125000},
        headers=TENANT,
    )
    match = r.json()["matches"][0]
    assert match["matchBreakdown"]["priceMatch"] == 0
    assert match["explanation"] == ["Rent of $2,000 is 60% over your $1,250 budget"]


async def test_bad_preferences_are_400(client):
    await client.post("/api/tenant-scores/me/default", headers=TENANT)

    r = await client.get("/api/tenant-scores/5/property-matches", params={"budget": "lots"}, headers=TENANT)
    assert r.status_code == 400
    assert r.json()["type"] == "ValidationError"

    r = await client.get("/api/tenant-scores/5/property-matches", params={"budget": 0}, headers=TENANT)
    assert r.status_code == 400

    r = await client.get("/api/tenant-scores/5/property-matches", params={"limit": 0}, headers=TENANT)
    assert r.status_code == 400


async def test_no_listings_message(client):
    await client.post("/api/tenant-scores/me/default", headers=TENANT)
    r = await client.get("/api/tenant-scores/5/property-matches", headers=TENANT)
    assert r.status_code == 200
    assert r.json() == {"matches": [], "message": "No available properties to match"}


async def test_identity_and_permissions(client):
    r = await client.get("/api/tenant-scores/me")
    assert r.status_code == 401

    await client.post("/api/tenant-scores/me/default", headers=TENANT)

    r = await client.get("/api/tenant-scores/5/property-matches", headers=OTHER_TENANT)
    assert r.status_code == 403
    assert r.json()["type"] == "PermissionDeniedError"

    r = await client.get("/api/tenant-scores", params={"tenantId": 5}, headers=LANDLORD)
    assert r.status_code == 200
    assert len(r.json()) == 1

    r = await client.post("/api/tenant-scores/me/default", headers=LANDLORD)
    assert r.status_code == 400


async def test_record_and_correct_score(client):
    body = {"tenantId": 5, "paymentHistory": 90, "creditScore": 80, "incomeToRentRatio": 70}

    r = await client.post("/api/tenant-score", json=body, headers=TENANT)
    assert r.status_code == 403

    r = await client.post("/api/tenant-score", json={**body, "overall": 99}, headers=LANDLORD)
    assert r.status_code == 400

    r = await client.post("/api/tenant-score", json={**body, "creditScore": 101}, headers=LANDLORD)
    assert r.status_code == 400

    r = await client.post("/api/tenant-score", json=body, headers=LANDLORD)
    assert r.status_code == 201
    first = r.json()
    assert first["incomeStability"] == 70
    assert first["references"] is None
    # 20*90 + 15*80 + 15*70 + 50*50 = 6550
    assert first["overallScore"] == 66

    r = await client.patch(f"/api/tenant-score/{first['id']}", json={"references": 100}, headers=LANDLORD)
    assert r.status_code == 200
    assert r.json()["overallScore"] == 68

    r = await client.post("/api/tenant-score", json=body, headers=LANDLORD)
    second = r.json()

    r = await client.get(f"/api/tenant-score/{first['id']}", headers=TENANT)
    assert r.json()["active"] is False

    r = await client.patch(f"/api/tenant-score/{first['id']}", json={"references": 10}, headers=LANDLORD)
    assert r.status_code == 400

    r = await client.get("/api/tenant-scores/me", headers=TENANT)
    assert r.json()["id"] == second["id"]

    r = await client.get("/api/tenant-score/999", headers=LANDLORD)
    assert r.status_code == 404


async def test_improvement_recommendations(client):
    r = await client.get("/api/score-improvement-recommendations/5", headers=TENANT)
    assert r.status_code == 404

    r = await client.get(
        "/api/score-improvement-recommendations/5", params={"createDefault": "true"}, headers=TENANT
    )
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"score", "recommendations", "improvementPlans", "actionableItems"}
    assert body["score"]["overall"] == 50
    assert body["score"]["paymentHistory"] == 50

    top = body["recommendations"][0]
    assert top["dimension"] == "paymentHistory"
    assert top["type"] == "medium"
    assert top["impact"] == 10
    assert top["actionItems"]

    assert body["improvementPlans"][0]["potentialIncrease"] == 21
    assert body["actionableItems"][0]["estimatedTime"] == "15 minutes"


async def test_score_analysis(client):
    await client.post("/api/tenant-scores/me/default", headers=TENANT)

    r = await client.get("/api/tenant-score-analysis/5", headers=TENANT)
    assert r.status_code == 200
    body = r.json()
    assert body["overall"] == 50
    assert body["status"] == "fair"
    assert body["breakdown"]["creditScore"]["rating"] == "fair"
    assert len(body["improvementAreas"]) == 11


async def test_properties_crud(client):
    listing = {
        "title": "Leslieville 2BR",
        "address": "12 Queen St E",
        "city": "Toronto",
        "state": "ON",
        "zipCode": "M4M 1J1",
        "rent": 240000,
        "bedrooms": 2,
        "amenities": ["Parking", " laundry "],
        "availableDate": "2024-07-01",
    }

    r = await client.post("/api/properties", json=listing, headers=TENANT)
    assert r.status_code == 403

    r = await client.post("/api/properties", json=listing, headers=LANDLORD)
    assert r.status_code == 201
    created = r.json()
    assert created["landlordId"] == 900
    assert created["amenities"] == ["laundry", "parking"]
    assert created["availableDate"] == "2024-07-01"

    r = await client.post("/api/properties", json={**listing, "address": "12  queen st e"}, headers=LANDLORD)
    assert r.status_code == 409

    r = await client.get("/api/properties", params={"available": "true"}, headers=TENANT)
    assert [p["id"] for p in r.json()] == [created["id"]]

    r = await client.get(f"/api/properties/{created['id']}", headers=TENANT)
    assert r.json()["title"] == "Leslieville 2BR"

    r = await client.get("/api/properties/999", headers=TENANT)
    assert r.status_code == 404


async def test_scoring_method_changes_overall(client):
    body = {"tenantId": 7, "creditScore": 100, "paymentHistory": 0}

    r = await client.post("/api/tenant-score", json={**body, "scoringMethod": "whatever"}, headers=LANDLORD)
    assert r.status_code == 400
    assert "unknown scoring method" in r.json()["error"]

    r = await client.post("/api/tenant-score", json={**body, "scoringMethod": "credit-only"}, headers=LANDLORD)
    assert r.status_code == 201
    assert r.json()["overallScore"] == 100
    assert r.json()["scoringMethod"] == "credit-only"

    r = await client.post("/api/tenant-score", json={**body, "scoringMethod": "basic"}, headers=LANDLORD)
    assert r.json()["overallScore"] == 70

    # corrections keep the row's method
    r = await client.patch(f"/api/tenant-score/{r.json()['id']}", json={"creditScore": 50}, headers=LANDLORD)
    assert r.json()["overallScore"] == 50


async def test_raw_signals_fill_sub_scores(client):
    body = {
        "tenantId": 8,
        "rawCreditScore": 750,
        "monthlyIncome": 600000,
        "monthlyRent": 200000,
        "scoringMethod": "basic",
    }
    r = await client.post("/api/tenant-score", json=body, headers=LANDLORD)
    assert r.status_code == 201
    created = r.json()
    assert created["creditScore"] == 75
    assert created["incomeStability"] == 90
    # 40*75 + 30*90 + 20*50 + 10*50
    assert created["overallScore"] == 72


async def test_patch_null_resets_sub_score(client):
    body = {"tenantId": 5, "paymentHistory": 90, "creditScore": 80, "incomeToRentRatio": 70, "references": 100}
    r = await client.post("/api/tenant-score", json=body, headers=LANDLORD)
    score_id = r.json()["id"]
    assert r.json()["overallScore"] == 68

    r = await client.patch(f"/api/tenant-score/{score_id}", json={"references": None}, headers=LANDLORD)
    assert r.status_code == 200
    assert r.json()["references"] is None
    assert r.json()["creditScore"] == 80
    assert r.json()["overallScore"] == 66


async def test_only_the_tenant_can_create_default_via_recommendations(client):
    r = await client.get(
        "/api/score-improvement-recommendations/5", params={"createDefault": "true"}, headers=LANDLORD
    )
    assert r.status_code == 400

    r = await client.get("/api/tenant-scores", params={"tenantId": 5}, headers=LANDLORD)
    assert r.json() == []


async def test_property_create_race_is_409(client, monkeypatch):
    from app.adapters.repos.properties import PropertyRepository

    listing = {"title": "Danforth 1BR", "address": "800 Danforth Ave", "city": "Toronto", "state": "ON",
               "zipCode": "M4J 1L6", "rent": 180000}
    r = await client.post("/api/properties", json=listing, headers=LANDLORD)
    assert r.status_code == 201

    async def not_found_yet(self, payload):
        return None

    monkeypatch.setattr(PropertyRepository, "get_by_address", not_found_yet)

    r = await client.post("/api/properties", json=listing, headers=LANDLORD)
    assert r.status_code == 409
    assert r.json()["type"] == "ConflictError"
