"""Tests for draft session and place search endpoints."""

from __future__ import annotations

import httpx

API_TOKEN = "api-test-token"

STOPS = [
    {"id": "a", "name": "A", "latitude": 0.0, "longitude": 0.0},
    {"id": "b", "name": "B", "latitude": 1.0, "longitude": 0.0},
    {"id": "c", "name": "C", "latitude": 2.0, "longitude": 0.0},
]


async def _open(client, **body) -> str:
    resp = await client.post("/api/drafts", json=body or {"kind": "trip"})
    assert resp.status_code == 201
    return resp.json()["sessionId"]


async def _add_stops(client, sid: str, stops=STOPS) -> dict:
    data = {}
    for stop in stops:
        resp = await client.post(f"/api/drafts/{sid}/points", json=stop)
        assert resp.status_code == 201
        data = resp.json()
    return data


class TestDraftLifecycle:
    async def test_health(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_requires_bearer_token(self, test_app):
        transport = httpx.ASGITransport(app=test_app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as anon:
            resp = await anon.post("/api/drafts", json={"kind": "trip"})
        assert resp.status_code == 401

    async def test_new_draft_is_empty(self, client):
        resp = await client.post("/api/drafts", json={"kind": "hike"})
        data = resp.json()
        assert data["mode"] == "creating"
        assert data["profile"] == "walking"
        assert data["planType"] == 2
        assert data["points"] == []
        assert data["canSubmit"] is False

    async def test_create_and_submit(self, client, backend):
        sid = await _open(client)
        data = await _add_stops(client, sid)
        assert data["labels"] == ["Start", "Waypoint 1", "End"]
        assert data["metrics"]["distanceMeters"] == 2000

        resp = await client.patch(f"/api/drafts/{sid}/form", json={"title": "Test", "difficulty": 2})
        assert resp.json()["canSubmit"] is True

        resp = await client.post(f"/api/drafts/{sid}/submit")
        assert resp.status_code == 200
        plan = resp.json()["plan"]
        assert plan["totalDistanceInMeters"] == 2000
        assert [c["latitude"] for c in plan["routePath"]] == [0.0, 1.0, 2.0]
        assert plan["difficulty"] == 2

        created = backend.requests[-1]
        assert created.headers["authorization"] == f"Bearer {API_TOKEN}"
        assert (await client.get(f"/api/drafts/{sid}")).status_code == 404

    async def test_cancel(self, client, test_app):
        sid = await _open(client)
        assert (await client.delete(f"/api/drafts/{sid}")).status_code == 204
        assert len(test_app.state.draft_sessions) == 0
        assert (await client.get(f"/api/drafts/{sid}")).status_code == 404


class TestPoints:
    async def test_trip_rejects_unnamed_point(self, client):
        sid = await _open(client)
        resp = await client.post(f"/api/drafts/{sid}/points", json={"latitude": 1, "longitude": 1})
        assert resp.status_code == 422

    async def test_hike_accepts_map_clicks(self, client):
        sid = await _open(client, kind="hike")
        data = await _add_stops(client, sid, [
            {"latitude": 45.0, "longitude": 6.0},
            {"latitude": 45.01, "longitude": 6.01},
        ])
        assert len(data["points"]) == 2
        assert data["route"]["geometry"]["type"] == "LineString"

    async def test_move_reposition_remove_clear(self, client):
        sid = await _open(client)
        await _add_stops(client, sid)

        resp = await client.post(f"/api/drafts/{sid}/points/c/move", json={"direction": "up"})
        assert [p["id"] for p in resp.json()["points"]] == ["a", "c", "b"]

        resp = await client.post(f"/api/drafts/{sid}/points/a/position", json={"index": 2})
        assert [p["id"] for p in resp.json()["points"]] == ["c", "b", "a"]

        resp = await client.delete(f"/api/drafts/{sid}/points/b")
        assert [p["id"] for p in resp.json()["points"]] == ["c", "a"]

        assert (await client.delete(f"/api/drafts/{sid}/points/zzz")).status_code == 404
        assert (await client.post(
            f"/api/drafts/{sid}/points/zzz/move", json={"direction": "up"}
        )).status_code == 404

        resp = await client.delete(f"/api/drafts/{sid}/points")
        assert resp.json()["points"] == []
        assert "route" not in resp.json()

    async def test_switch_profile(self, client, mapbox):
        sid = await _open(client)
        await _add_stops(client, sid, STOPS[:2])
        resp = await client.put(f"/api/drafts/{sid}/profile", json={"profile": "cycling"})
        assert resp.json()["profile"] == "cycling"
        assert "/cycling/" in mapbox.directions_calls()[-1].url.path


class TestSubmitErrors:
    async def test_validation_error(self, client):
        sid = await _open(client)
        await _add_stops(client, sid, STOPS[:1])
        resp = await client.post(f"/api/drafts/{sid}/submit")
        assert resp.status_code == 422
        assert set(resp.json()["fieldErrors"]) == {"title", "points"}

    async def test_route_unavailable(self, client, mapbox):
        mapbox.directions_status = 500
        sid = await _open(client)
        data = await _add_stops(client, sid, STOPS[:2])
        assert data["lastError"]["code"] == "route_unavailable"

        await client.patch(f"/api/drafts/{sid}/form", json={"title": "x"})
        resp = await client.post(f"/api/drafts/{sid}/submit")
        assert resp.status_code == 409

    async def test_backend_failure_keeps_session(self, client, backend):
        backend.fail("POST", "/api/travelplans", 500)
        sid = await _open(client)
        await _add_stops(client, sid, STOPS[:2])
        await client.patch(f"/api/drafts/{sid}/form", json={"title": "x"})

        resp = await client.post(f"/api/drafts/{sid}/submit")

        assert resp.status_code == 502
        still_there = await client.get(f"/api/drafts/{sid}")
        assert len(still_there.json()["points"]) == 2

    async def test_cover_image(self, client, backend):
        sid = await _open(client)
        await _add_stops(client, sid, STOPS[:2])
        await client.patch(f"/api/drafts/{sid}/form", json={"title": "x"})

        bad = await client.put(
            f"/api/drafts/{sid}/cover-image",
            files={"file": ("doc.txt", b"text", "text/plain")},
        )
        assert bad.status_code == 422
        good = await client.put(
            f"/api/drafts/{sid}/cover-image",
            files={"file": ("c.png", b"\x89PNG", "image/png")},
        )
        assert good.status_code == 204

        resp = await client.post(f"/api/drafts/{sid}/submit")
        assert resp.json()["coverImageFailed"] is False
        assert backend.cover_uploads == [resp.json()["plan"]["travelPlanID"]]

    async def test_remove_cover_image(self, client, backend):
        sid = await _open(client)
        await _add_stops(client, sid, STOPS[:2])
        await client.patch(f"/api/drafts/{sid}/form", json={"title": "x"})
        await client.put(
            f"/api/drafts/{sid}/cover-image",
            files={"file": ("c.png", b"\x89PNG", "image/png")},
        )
        assert (await client.get(f"/api/drafts/{sid}")).json()["hasCoverImage"] is True

        assert (await client.delete(f"/api/drafts/{sid}/cover-image")).status_code == 204
        assert (await client.get(f"/api/drafts/{sid}")).json()["hasCoverImage"] is False

        await client.post(f"/api/drafts/{sid}/submit")
        assert backend.cover_uploads == []


class TestSessionOwnership:
    async def test_other_token_is_rejected(self, client, test_app, backend):
        sid = await _open(client)
        await _add_stops(client, sid, STOPS[:2])
        await client.patch(f"/api/drafts/{sid}/form", json={"title": "Mine"})

        transport = httpx.ASGITransport(app=test_app)
        async with httpx.AsyncClient(
            transport=transport,
            base_url="http://test",
            headers={"Authorization": "Bearer someone-else"},
        ) as other:
            assert (await other.get(f"/api/drafts/{sid}")).status_code == 403
            resp = await other.post(f"/api/drafts/{sid}/points", json=STOPS[2])
            assert resp.status_code == 403
            assert (await other.post(f"/api/drafts/{sid}/submit")).status_code == 403

        assert len((await client.get(f"/api/drafts/{sid}")).json()["points"]) == 2
        resp = await client.post(f"/api/drafts/{sid}/submit")
        assert resp.status_code == 200
        assert backend.requests[-1].headers["authorization"] == f"Bearer {API_TOKEN}"
        assert all(
            r.headers.get("authorization") != "Bearer someone-else" for r in backend.requests
        )


class TestEditDraft:
    async def test_open_existing_plan(self, client, backend):
        plan = backend.add_plan(
            title="Existing",
            type=2,
            totalDistanceInMeters=800,
            routePath=[{"latitude": 45.0, "longitude": 6.0}, {"latitude": 45.1, "longitude": 6.1}],
        )
        resp = await client.post("/api/drafts", json={"planId": plan["travelPlanID"]})

        data = resp.json()
        assert resp.status_code == 201
        assert data["mode"] == "editing"
        assert data["planId"] == plan["travelPlanID"]
        assert data["profile"] == "walking"
        assert data["metrics"]["distanceMeters"] == 800

        resp = await client.post(f"/api/drafts/{data['sessionId']}/submit")
        assert resp.status_code == 200
        assert backend.calls("PUT", f"/api/travelplans/{plan['travelPlanID']}") == 1

    async def test_unknown_plan(self, client):
        resp = await client.post("/api/drafts", json={"planId": 999})
        assert resp.status_code == 404


class TestPlaceSearch:
    async def test_search(self, client, backend):
        backend.places_response = {"status": "OK", "results": [{
            "place_id": "p1",
            "name": "Cafe de Flore",
            "formatted_address": "172 Bd Saint-Germain, Paris",
            "geometry": {"location": {"lat": 48.854, "lng": 2.333}},
            "types": ["cafe", "point_of_interest"],
        }]}

        resp = await client.get(
            "/api/places/search",
            params={"query": "flore", "latitude": 48.85, "longitude": 2.33},
        )

        assert resp.status_code == 200
        [place] = resp.json()
        assert place["placeId"] == "p1"
        assert place["stop"]["category"] == "Cafe"
        assert place["distanceKm"] < 1

    async def test_denied(self, client, backend):
        backend.places_response = {"status": "REQUEST_DENIED", "error_message": "bad key"}
        resp = await client.get("/api/places/search", params={"query": "x"})
        assert resp.status_code == 502

    async def test_backend_outage(self, client, backend):
        backend.fail("GET", "/api/config/search-places", 500)
        resp = await client.get("/api/places/search", params={"query": "cafe"})
        assert resp.status_code == 502
