"""Unit tests for src/services/simchess_service.py"""

import pytest

from src.api.models import (
    ColorRequest,
    GameResponse,
    LegalMovesRequest,
    RoundResponse,
    SubmitMoveRequest,
)
from src.core.exceptions import GameError, IllegalMoveError, NotYourTurnError
from src.core.shared_types import Color, PieceType
from src.services.simchess_service import SimChessService
from src.simchess.board import STARTING_POSITION, Board
from src.simchess.game import GameState
from src.simchess.pieces import Piece
from src.simchess.resolution import CollisionRule
from src.simchess.square import Square


@pytest.fixture
def service() -> SimChessService:
    return SimChessService()


def enter_move(service: SimChessService, color: Color, from_square: str, to_square: str) -> None:
    service.submit_move(
        SubmitMoveRequest(color=color, from_square=from_square, to_square=to_square)
    )
    service.confirm_move(ColorRequest(color=color))


# --- SERVICE - GAME STATE ----
def test_new_game_state(service: SimChessService) -> None:
    response = service.get_game()

    assert isinstance(response, GameResponse)
    assert response.board_fen == STARTING_POSITION
    assert response.board_text[7] == "♖ ♘ ♗ ♕ ♔ ♗ ♘ ♖"
    assert response.current_player == Color.WHITE
    assert response.pending_moves == {"white": None, "black": None}
    assert response.confirmed == {"white": False, "black": False}
    assert not response.ready_to_resolve
    assert response.history == []
    assert response.last_move_squares == []
    assert response.game_over is None


# --- SERVICE - ROUND PROTOCOL ----
def test_submit_move(service: SimChessService) -> None:
    response = service.submit_move(
        SubmitMoveRequest(color=Color.WHITE, from_square="e2", to_square="e4")
    )
    assert response.pending_moves == {"white": "e2-e4", "black": None}
    # not executed yet
    assert response.board_fen == STARTING_POSITION


def test_submit_move_with_uppercase_squares(service: SimChessService) -> None:
    response = service.submit_move(
        SubmitMoveRequest(color=Color.WHITE, from_square="G1", to_square="F3")
    )
    assert response.pending_moves["white"] == "g1-f3"


def test_rejected_side_can_resubmit() -> None:
    """After an invalid move the rejected side enters a new move, the other move is kept"""
    service = SimChessService()
    enter_move(service, Color.WHITE, "e2", "e4")
    enter_move(service, Color.BLACK, "e7", "e5")
    # block the black pawn before the round is resolved
    service.game.board.place_piece(Piece(PieceType.KNIGHT, Color.WHITE), Square.from_algebraic("e5"))

    round_response = service.resolve_round()
    assert not round_response.success
    assert round_response.message == "Invalid black move"

    game = service.get_game()
    assert game.current_player == Color.BLACK
    assert game.pending_moves == {"white": "e2-e4", "black": "e7-e5"}
    assert game.confirmed == {"white": True, "black": False}

    enter_move(service, Color.BLACK, "d7", "d5")
    round_response = service.resolve_round()

    assert round_response.success
    assert round_response.black_move == "d7-d5"


def test_confirm_move_hands_over_the_turn(service: SimChessService) -> None:
    service.submit_move(SubmitMoveRequest(color=Color.WHITE, from_square="e2", to_square="e4"))
    response = service.confirm_move(ColorRequest(color=Color.WHITE))
    assert response.confirmed == {"white": True, "black": False}
    assert response.current_player == Color.BLACK


def test_clear_move(service: SimChessService) -> None:
    service.submit_move(SubmitMoveRequest(color=Color.WHITE, from_square="e2", to_square="e4"))
    response = service.clear_move(ColorRequest(color=Color.WHITE))
    assert response.pending_moves["white"] is None


def test_full_round(service: SimChessService) -> None:
    enter_move(service, Color.WHITE, "e2", "e4")
    enter_move(service, Color.BLACK, "e7", "e5")
    assert service.get_game().ready_to_resolve

    round_response = service.resolve_round()

    assert isinstance(round_response, RoundResponse)
    assert round_response.success
    assert round_response.white_move == "e2-e4"
    assert round_response.black_move == "e7-e5"
    assert round_response.conflicts == []
    assert round_response.touched_squares == ["e2", "e4", "e5", "e7"]
    assert round_response.game_over is None

    game = service.get_game()
    assert game.board_fen == "rnbqkbnr/pppp1ppp/8/4p3/4P3/8/PPPP1PPP/RNBQKBNR"
    assert game.current_player == Color.WHITE
    assert [record.round_number for record in game.history] == [1]
    assert game.history[0].white_move == "e2-e4"
    assert game.last_move_squares == ["e2", "e4", "e5", "e7"]


def test_round_without_both_moves(service: SimChessService) -> None:
    """A rejected round is reported, not raised"""
    enter_move(service, Color.WHITE, "e2", "e4")
    round_response = service.resolve_round()

    assert not round_response.success
    assert round_response.message == "Both players must have moves"
    assert service.get_game().history == []


def test_mutual_capture_round() -> None:
    service = SimChessService(GameState.new(Board.from_fen("4k3/8/8/8/4Rr2/8/8/4K3")))
    enter_move(service, Color.WHITE, "e4", "f4")
    enter_move(service, Color.BLACK, "f4", "e4")

    round_response = service.resolve_round()

    assert round_response.conflicts == ["Mutual capture - both pieces removed"]
    assert round_response.touched_squares == ["e4", "f4"]
    assert service.get_game().board_fen == "4k3/8/8/8/8/8/8/4K3"


def test_collision_rule_configured_on_game() -> None:
    game = GameState.new(
        Board.from_fen("4k3/8/8/8/6q1/5P2/8/4K3"),
        collision_rule=CollisionRule.LOWER_VALUE_WINS,
    )
    service = SimChessService(game)
    enter_move(service, Color.WHITE, "f3", "f4")
    enter_move(service, Color.BLACK, "g4", "f4")

    round_response = service.resolve_round()

    assert round_response.conflicts == ["Collision - Black piece removed, White moves"]
    assert service.get_game().board_fen == "4k3/8/8/8/5P2/8/8/4K3"


def test_game_over_reported() -> None:
    service = SimChessService(GameState.new(Board.from_fen("R3k3/7p/8/8/8/8/8/4K3")))
    enter_move(service, Color.WHITE, "a8", "e8")
    enter_move(service, Color.BLACK, "h7", "h6")

    round_response = service.resolve_round()

    assert round_response.game_over == "White wins - Black king captured!"
    assert service.get_game().game_over == "White wins - Black king captured!"


# --- SERVICE - ERRORS ----
def test_submit_out_of_turn(service: SimChessService) -> None:
    with pytest.raises(NotYourTurnError):
        service.submit_move(
            SubmitMoveRequest(color=Color.BLACK, from_square="e7", to_square="e5")
        )


def test_submit_illegal_move(service: SimChessService) -> None:
    with pytest.raises(IllegalMoveError):
        service.submit_move(
            SubmitMoveRequest(color=Color.WHITE, from_square="e2", to_square="e5")
        )


def test_errors_share_a_base_class(service: SimChessService) -> None:
    """Front ends can catch every refusal in one go"""
    with pytest.raises(GameError):
        service.confirm_move(ColorRequest(color=Color.WHITE))


# --- SERVICE - LEGAL MOVES / RESET ----
def test_legal_moves(service: SimChessService) -> None:
    response = service.legal_moves(LegalMovesRequest(square="g1"))
    assert response.square == "g1"
    assert sorted(response.legal_moves) == ["f3", "h3"]


def test_legal_moves_of_empty_square(service: SimChessService) -> None:
    assert service.legal_moves(LegalMovesRequest(square="e4")).legal_moves == []


def test_reset(service: SimChessService) -> None:
    enter_move(service, Color.WHITE, "e2", "e4")
    enter_move(service, Color.BLACK, "e7", "e5")
    service.resolve_round()

    response = service.reset()

    assert response.board_fen == STARTING_POSITION
    assert response.history == []
    assert response.pending_moves == {"white": None, "black": None}
    assert response.confirmed == {"white": False, "black": False}
    assert response.current_player == Color.WHITE
