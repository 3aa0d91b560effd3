"""
Contract tests for user endpoints.
"""

from helpers import OTHER_WALLET, WALLET


def test_register_user(client):
    response = client.post("/api/v1/users", json={"walletAddress": WALLET, "username": "magnus"})

    assert response.status_code == 200
    data = response.json()
    assert data["walletAddress"] == WALLET
    assert data["username"] == "magnus"
    assert data["successRate"] == 50
    assert data["preferredDifficulty"] == "medium"
    assert data["skillLevel"] == "intermediate"


def test_register_is_idempotent(client):
    client.post("/api/v1/users", json={"walletAddress": WALLET})
    client.post("/api/v1/users", json={"walletAddress": WALLET, "username": "magnus"})

    data = client.get(f"/api/v1/users/{WALLET}").json()
    assert data["username"] == "magnus"


def test_unknown_user(client):
    response = client.get(f"/api/v1/users/{OTHER_WALLET}")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "USER_NOT_FOUND"


def test_stats(client):
    for move in ("e4", "Bxf7+"):
        client.post(
            "/api/v1/attempts",
            json={"walletAddress": WALLET, "puzzleId": 1, "move": move, "elapsedSeconds": 10}
        )

    response = client.get(f"/api/v1/users/{WALLET}/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["totalAttempts"] == 2
    assert data["correctAttempts"] == 1
    assert data["successRate"] == 50
    assert data["completedPuzzles"] == 1
    assert data["longestStreak"] == 1
    assert data["mintedAttempts"] == 0


def test_minted_list_empty(client):
    client.post("/api/v1/users", json={"walletAddress": WALLET})
    assert client.get(f"/api/v1/users/{WALLET}/minted").json() == []
