"""Unit tests for src/services/ludo_service.py"""

from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.core.exceptions import (
    AlreadyRolledError,
    GameError,
    GameNotFoundError,
    InvalidMoveError,
    NotYourTurnError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, Status
from src.services.ludo_service import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    LudoService,
    MoveRequest,
    MoveResponse,
    ReadyRequest,
    RollRequest,
    RollResponse,
    StartGameRequest,
    StartMatchRequest,
)


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}
        self.updates = 0

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self.updates += 1
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def place_piece(self, game_id: UUID, player_index: int, piece_id: int, position: int) -> None:
        """Test helper: move a piece directly in the stored record."""
        piece = self._games[game_id].players[player_index].pieces[piece_id]
        piece.position = position
        piece.is_home = False

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


def start_match(service: LudoService) -> UUID:
    """Alice (red) vs Bob (blue), already playing."""
    request = StartMatchRequest(
        room_id="ROOM42",
        participants=[
            {"user_id": "alice", "username": "Alice"},
            {"user_id": "bob", "username": "Bob"},
        ],
    )
    return service.start_match(request).game_id


# --- SERVICE - LOBBY ----
def test_create_a_new_game(mock_repository: MockRepository, fixed_dice) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    service = LudoService(mock_repository, dice=fixed_dice(6))
    response = service.create_new_game(
        CreateGameRequest(user_id="alice", username="Alice", room_id="ROOM42")
    )

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.status == Status.WAITING
    assert response.room_id == "ROOM42"
    assert [player.user_id for player in response.players] == ["alice"]
    assert response.players[0].color == Color.RED
    assert [piece.position for piece in response.players[0].pieces] == [-1, -1, -1, -1]

    # Check persisted data
    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.status == Status.WAITING
    assert stored_game.players[0].user_id == "alice"


def test_join_ready_and_start(mock_repository: MockRepository) -> None:
    service = LudoService(mock_repository)
    game_id = service.create_new_game(
        CreateGameRequest(user_id="alice", username="Alice")
    ).game_id

    response = service.join_game(
        JoinGameRequest(game_id=game_id, user_id="bob", username="Bob")
    )
    assert [player.color for player in response.players] == [Color.RED, Color.BLUE]

    for user_id in ["alice", "bob"]:
        response = service.set_ready(ReadyRequest(game_id=game_id, user_id=user_id))
    assert all(player.is_ready for player in response.players)

    response = service.start_game(StartGameRequest(game_id=game_id, user_id="alice"))
    assert response.status == Status.PLAYING
    assert mock_repository.get_game(game_id).status == Status.PLAYING


def test_cannot_join_unknown_game(mock_repository: MockRepository) -> None:
    """A GameError should be raised if attempting to join a not yet existing game."""
    service = LudoService(mock_repository)
    request = JoinGameRequest(game_id=uuid4(), user_id="bob", username="Bob")
    with pytest.raises(GameNotFoundError):
        _ = service.join_game(request)


def test_start_match(mock_repository: MockRepository) -> None:
    service = LudoService(mock_repository)
    game_id = start_match(service)
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.status == Status.PLAYING
    assert stored.room_id == "ROOM42"
    assert [player.color for player in stored.players] == [Color.RED, Color.BLUE]


# --- SERVICE - GET GAME ----
def test_get_existing_game_state(mock_repository: MockRepository) -> None:
    service = LudoService(mock_repository)
    game_id = start_match(service)
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert isinstance(response, GameResponse)
    assert response.game_id == game_id
    assert response.current_turn == 0
    assert response.winner is None


def test_attempt_to_find_unknown_game(mock_repository: MockRepository) -> None:
    """Ensure exception is raised when trying to look up a game with an unknown ID."""
    service = LudoService(mock_repository)
    with pytest.raises(GameError):
        _ = service.get_game_state(GetGameRequest(game_id=uuid4()))


def test_snapshot_is_json_compatible(mock_repository: MockRepository) -> None:
    service = LudoService(mock_repository)
    game_id = start_match(service)
    data = service.get_game_state(GetGameRequest(game_id=game_id)).model_dump(mode="json")
    assert data["game_id"] == str(game_id)
    assert data["status"] == "playing"
    assert data["players"][1]["color"] == "blue"


# --- SERVICE - ROLL ----
def test_roll_dice(mock_repository: MockRepository, fixed_dice) -> None:
    service = LudoService(mock_repository, dice=fixed_dice(6))
    game_id = start_match(service)

    response = service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))
    assert isinstance(response, RollResponse)
    assert response.dice_value == 6
    assert response.can_move
    assert not response.turn_advanced
    assert response.game.has_rolled_dice
    assert mock_repository.get_game(game_id).dice_value == 6


def test_roll_without_moves_passes_turn(mock_repository: MockRepository, fixed_dice) -> None:
    service = LudoService(mock_repository, dice=fixed_dice(3))
    game_id = start_match(service)
    response = service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))
    assert response.turn_advanced
    assert response.next_user_id == "bob"
    assert response.game.current_turn == 1
    assert not response.game.has_rolled_dice


def test_rejected_roll_is_not_stored(mock_repository: MockRepository, fixed_dice) -> None:
    service = LudoService(mock_repository, dice=fixed_dice(6))
    game_id = start_match(service)
    service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))
    updates = mock_repository.updates

    with pytest.raises(AlreadyRolledError):
        service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))
    with pytest.raises(NotYourTurnError):
        service.roll_dice(RollRequest(game_id=game_id, user_id="bob"))
    assert mock_repository.updates == updates


def test_roll_unknown_game(mock_repository: MockRepository) -> None:
    service = LudoService(mock_repository)
    with pytest.raises(GameNotFoundError):
        service.roll_dice(RollRequest(game_id=uuid4(), user_id="alice"))


# --- SERVICE - MOVE ----
def test_move_piece_with_capture(mock_repository: MockRepository, fixed_dice) -> None:
    service = LudoService(mock_repository, dice=fixed_dice(4))
    game_id = start_match(service)
    mock_repository.place_piece(game_id, 0, 0, 10)
    mock_repository.place_piece(game_id, 1, 3, 14)

    service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))
    response = service.move_piece(MoveRequest(game_id=game_id, user_id="alice", piece_id=0))

    assert isinstance(response, MoveResponse)
    assert (response.from_position, response.to_position) == (10, 14)
    assert response.captured_piece is not None
    assert response.captured_piece.color == Color.BLUE
    assert response.captured_piece.piece_id == 3
    assert response.winner is None
    assert response.next_user_id == "bob"

    stored = mock_repository.get_game(game_id)
    assert stored.players[1].pieces[3].position == -1
    assert stored.players[0].pieces[0].position == 14
    assert stored.current_turn == 1


def test_invalid_move_is_not_stored(mock_repository: MockRepository, fixed_dice) -> None:
    service = LudoService(mock_repository, dice=fixed_dice(2))
    game_id = start_match(service)
    mock_repository.place_piece(game_id, 0, 0, 20)
    service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))
    before = mock_repository.get_game(game_id)

    with pytest.raises(InvalidMoveError):
        service.move_piece(MoveRequest(game_id=game_id, user_id="alice", piece_id=1))
    assert mock_repository.get_game(game_id) == before


def test_winning_move(mock_repository: MockRepository, fixed_dice) -> None:
    service = LudoService(mock_repository, dice=fixed_dice(1))
    game_id = start_match(service)
    for piece_id in range(3):
        mock_repository.place_piece(game_id, 0, piece_id, 57)
        mock_repository.get_game(game_id).players[0].pieces[piece_id].is_home = True
    mock_repository.place_piece(game_id, 0, 3, 56)

    service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))
    response = service.move_piece(MoveRequest(game_id=game_id, user_id="alice", piece_id=3))
    assert response.winner == "alice"
    assert response.game.status == Status.FINISHED
    assert response.game.winner == "alice"

    with pytest.raises(GameError):
        service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))


# --- SERVICE - LEGAL MOVES ----
def test_getting_legal_moves(mock_repository: MockRepository, fixed_dice) -> None:
    service = LudoService(mock_repository, dice=fixed_dice(2))
    game_id = start_match(service)
    mock_repository.place_piece(game_id, 0, 1, 30)
    service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))

    response = service.legal_moves(LegalMovesRequest(game_id=game_id, user_id="alice"))
    assert isinstance(response, LegalMovesResponse)
    assert response.color == Color.RED
    assert response.dice_value == 2
    assert response.movable_pieces == [1]


def test_getting_legal_moves_before_your_turn(mock_repository: MockRepository, fixed_dice) -> None:
    """Service must propagate error raised by Game upwards."""
    service = LudoService(mock_repository, dice=fixed_dice(6))
    game_id = start_match(service)
    service.roll_dice(RollRequest(game_id=game_id, user_id="alice"))
    with pytest.raises(NotYourTurnError):
        service.legal_moves(LegalMovesRequest(game_id=game_id, user_id="bob"))


# --- SERVICE - DELETE ----
def test_delete_game(mock_repository: MockRepository) -> None:
    service = LudoService(mock_repository)
    game_id = start_match(service)
    service.delete_game(DeleteGameRequest(game_id=game_id))
    assert mock_repository.get_game(game_id) is None
    assert len(service.locks) == 0
    with pytest.raises(GameNotFoundError):
        service.get_game_state(GetGameRequest(game_id=game_id))
