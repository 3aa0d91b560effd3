"""
Contract tests for attempt endpoints.
"""

import pytest

from helpers import OTHER_WALLET, WALLET


def submit(client, move, puzzle_id=1, elapsed=30, wallet=WALLET):
    return client.post(
        "/api/v1/attempts",
        json={"walletAddress": wallet, "puzzleId": puzzle_id, "move": move, "elapsedSeconds": elapsed}
    )


class TestSubmitAttempt:

    def test_correct_submission_schema(self, client):
        response = submit(client, "bxf7+")

        assert response.status_code == 201
        data = response.json()
        assert data["isCorrect"] is True
        assert data["attemptNumber"] == 1
        assert data["attemptsRemaining"] == 2
        assert data["userId"] == WALLET
        assert data["puzzleId"] == 1
        assert data["elapsedSeconds"] == 30
        assert data["mintReference"] is None
        assert data["message"] == "Correct! Well played."

    def test_incorrect_submission_message(self, client):
        data = submit(client, "Nf3").json()

        assert data["isCorrect"] is False
        assert data["message"] == "Incorrect. You have 2 attempts left."

    def test_fourth_submission_conflicts(self, client):
        messages = [submit(client, move).json()["message"] for move in ("e4", "d4", "c4")]
        assert messages[-1] == "Incorrect. No attempts left for this puzzle."

        response = submit(client, "Bxf7+")

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "ATTEMPTS_EXHAUSTED"
        assert error["message"] == "You've already used all 3 attempts for this puzzle"

    def test_snake_case_body_accepted(self, client):
        response = client.post(
            "/api/v1/attempts",
            json={"wallet_address": WALLET, "puzzle_id": 1, "move": "e4", "elapsed_seconds": 3}
        )
        assert response.status_code == 201

    @pytest.mark.parametrize("body", [
        {"walletAddress": WALLET, "puzzleId": 1, "move": "e4"},
        {"walletAddress": WALLET, "puzzleId": 0, "move": "e4", "elapsedSeconds": 1},
        {"walletAddress": WALLET, "puzzleId": 1, "move": "e4", "elapsedSeconds": -1},
        {"walletAddress": "", "puzzleId": 1, "move": "e4", "elapsedSeconds": 1},
    ])
    def test_request_validation(self, client, body):
        response = client.post("/api/v1/attempts", json=body)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    def test_malformed_move(self, client):
        response = submit(client, "hello")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "MALFORMED_MOVE"

    def test_unknown_puzzle(self, client):
        response = submit(client, "e4", puzzle_id=77)
        assert response.status_code == 404


class TestAttemptHistory:

    def test_list_defaults_to_todays_puzzle(self, client):
        submit(client, "d4", puzzle_id=10)
        submit(client, "e4", puzzle_id=1)

        response = client.get("/api/v1/attempts", params={"walletAddress": WALLET})

        assert response.status_code == 200
        assert [item["puzzleId"] for item in response.json()] == [10]

    def test_list_for_puzzle(self, client):
        submit(client, "e4")
        submit(client, "d4")
        submit(client, "e4", wallet=OTHER_WALLET)

        data = client.get("/api/v1/attempts", params={"walletAddress": WALLET, "puzzleId": 1}).json()

        assert [item["attemptNumber"] for item in data] == [1, 2]

    def test_best_attempt(self, client):
        submit(client, "e4", elapsed=5)
        submit(client, "Bxf7+", elapsed=50)
        submit(client, "bxf7+", elapsed=25)

        data = client.get("/api/v1/attempts/best", params={"walletAddress": WALLET, "puzzleId": 1}).json()

        assert data["attemptNumber"] == 3
        assert data["elapsedSeconds"] == 25

    def test_best_attempt_null_without_correct(self, client):
        submit(client, "e4")

        response = client.get("/api/v1/attempts/best", params={"walletAddress": WALLET, "puzzleId": 1})

        assert response.status_code == 200
        assert response.json() is None


class TestMintReference:

    def test_attach_and_list_minted(self, client):
        attempt_id = submit(client, "Bxf7+").json()["id"]

        response = client.post(f"/api/v1/attempts/{attempt_id}/mint-reference", json={"reference": "mint-42"})

        assert response.status_code == 200
        assert response.json()["mintReference"] == "mint-42"
        minted = client.get(f"/api/v1/users/{WALLET}/minted").json()
        assert [item["id"] for item in minted] == [attempt_id]

    def test_second_mint_conflicts(self, client):
        attempt_id = submit(client, "Bxf7+").json()["id"]
        client.post(f"/api/v1/attempts/{attempt_id}/mint-reference", json={"reference": "mint-42"})

        response = client.post(f"/api/v1/attempts/{attempt_id}/mint-reference", json={"reference": "mint-43"})

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "MINT_REFERENCE_ALREADY_SET"

    def test_unknown_attempt(self, client):
        response = client.post("/api/v1/attempts/999/mint-reference", json={"reference": "mint-42"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ATTEMPT_NOT_FOUND"
