from uuid import UUID, uuid4

import pytest

from src.api.models import (
    CreateGameRequest,
    JoinGameRequest,
    MoveRequest,
    Participant,
    StartMatchRequest,
)
from src.core.exceptions import InvalidRequestError


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - identities --
def test_valid_create_request() -> None:
    request = CreateGameRequest(user_id="u-1", username="don't hate the player")
    assert request.room_id is None


@pytest.mark.parametrize("field", ["user_id", "username"])
def test_blank_identity_rejected(field: str) -> None:
    data = {"user_id": "u-1", "username": "name"}
    data[field] = "   "
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(**data)


def test_blank_username_when_joining(mock_id: UUID) -> None:
    with pytest.raises(InvalidRequestError):
        _ = JoinGameRequest(game_id=mock_id, user_id="u-2", username="")


# -- Validation - StartMatchRequest --
def test_valid_match() -> None:
    request = StartMatchRequest(
        room_id="ABC123",
        participants=[
            Participant(user_id="a", username="A"),
            Participant(user_id="b", username="B"),
            Participant(user_id="c", username="C"),
        ],
    )
    assert [p.user_id for p in request.participants] == ["a", "b", "c"]


@pytest.mark.parametrize("count", [0, 1, 5])
def test_match_needs_two_to_four_players(count: int) -> None:
    participants = [Participant(user_id=f"u{i}", username=f"U{i}") for i in range(count)]
    with pytest.raises(InvalidRequestError):
        _ = StartMatchRequest(participants=participants)


def test_match_with_duplicate_players() -> None:
    participants = [Participant(user_id="a", username="A"), Participant(user_id="a", username="A2")]
    with pytest.raises(InvalidRequestError):
        _ = StartMatchRequest(participants=participants)


# -- MoveRequest --
def test_move_request_accepts_any_piece_id(mock_id: UUID) -> None:
    """Ownership / existence of the piece is checked by the game, not by the request."""
    request = MoveRequest(game_id=mock_id, user_id="u-1", piece_id=7)
    assert request.piece_id == 7
