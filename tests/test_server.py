"""HTTP surface used by rendering clients."""
import pytest
from fastapi.testclient import TestClient

from server.app import app


@pytest.fixture
def client():
    # No context manager: the background stepping loop stays off.
    client = TestClient(app)
    response = client.post("/config", json={"strategy": "stand_only", "arrival_rate": 0, "rng_seed": 1})
    assert response.status_code == 200
    return client


def test_config_resets_state(client):
    state = client.get("/state").json()
    assert state["time"] == 0
    assert state["tick"] == 0
    assert state["strategy"] == "stand_only"
    assert state["config"]["rng_seed"] == 1
    assert state["running"] is False
    assert state["persons"] == []


def test_invalid_config_is_rejected(client):
    response = client.post("/config", json={"walking_percentage": 150})
    assert response.status_code == 400
    assert "walking_percentage" in response.json()["detail"]
    assert client.get("/state").json()["strategy"] == "stand_only"


def test_spawn_and_step(client):
    spawned = client.post("/persons/spawn", json={"count": 3}).json()
    assert spawned["spawned"] == [0, 1, 2]
    state = client.post("/control/step", params={"count": 11}).json()
    assert state["tick"] == 11
    assert state["time"] == pytest.approx(1.1)
    assert state["stats"]["total_arrived"] == 3
    assert state["stats"]["total_boarded"] == 3
    lanes = {person["lane"] for person in state["persons"]}
    assert lanes == {"a", "b"}


def test_step_count_must_be_positive(client):
    assert client.post("/control/step", params={"count": 0}).status_code == 400


def test_bad_behavior_is_rejected(client):
    response = client.post("/persons/spawn", json={"behavior": "runner"})
    assert response.status_code == 400


def test_start_pause_reset(client):
    assert client.post("/control/start").json()["running"] is True
    assert client.post("/control/pause").json()["running"] is False
    client.post("/persons/spawn", json={"count": 2})
    client.post("/control/step", params={"count": 5})
    state = client.post("/control/reset").json()
    assert state["tick"] == 0
    assert state["persons"] == []
    assert state["stats"]["total_arrived"] == 0
    assert state["config"]["strategy"] == "stand_only"


def test_non_finite_config_is_rejected(client):
    # json= refuses NaN, so send the raw body a lenient client would
    response = client.post(
        "/config", content=b'{"dt": NaN}', headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert "dt" in response.json()["detail"]
    response = client.post(
        "/config", content=b'{"belt_speed": Infinity}', headers={"content-type": "application/json"}
    )
    assert response.status_code == 400
    assert client.get("/state").json()["config"]["dt"] == 0.1


def test_statistics_and_speed_floor_are_configurable(client):
    response = client.post(
        "/config",
        json={
            "min_walk_speed": 0.2,
            "throughput_window": 30,
            "history_interval": 2,
            "history_length": 5,
        },
    )
    assert response.status_code == 200
    config = client.get("/state").json()["config"]
    assert config["min_walk_speed"] == 0.2
    assert config["throughput_window"] == 30
    assert config["history_interval"] == 2
    assert config["history_length"] == 5
