"""Orchestration of communication from a front end to the rules engine (and the reverse direction)."""

import logging

from src.api.models import (
    ColorRequest,
    GameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    RoundRecord,
    RoundResponse,
    SubmitMoveRequest,
)
from src.simchess.game import GameState
from src.simchess.moves import Move
from src.simchess.resolution import Outcome
from src.simchess.square import Square

_log = logging.getLogger(__name__)


class SimChessService:
    """
    Orchestration of one game of simultaneous chess.
    ----

    The service owns a single GameState (there is no persistence), and every call runs to completion before the next one.
    Front ends that serve several clients must serialize their calls.
    """

    def __init__(self, game: GameState | None = None) -> None:
        self.game = game if game is not None else GameState.new()

    # -- front end logic ---
    def get_game(self) -> GameResponse:
        """Current game state. Can be used in a polling loop to check whose move it is."""
        return self._create_game_response()

    def submit_move(self, request: SubmitMoveRequest) -> GameResponse:
        """A player entered a move (not yet confirmed)."""
        # Parse data in SubmitMoveRequest to move text, ex. "e2-e4"
        move = Move.from_text(f"{request.from_square}-{request.to_square}")
        self.game.submit_move(request.color, move)
        return self._create_game_response()

    def confirm_move(self, request: ColorRequest) -> GameResponse:
        """A player locked in the move."""
        self.game.confirm_move(request.color)
        return self._create_game_response()

    def clear_move(self, request: ColorRequest) -> GameResponse:
        """A player takes back an unconfirmed move."""
        self.game.clear_move(request.color)
        return self._create_game_response()

    def resolve_round(self) -> RoundResponse:
        """Execute both moves. A rejected round is reported in the response, not raised."""
        outcome = self.game.resolve_round()
        return self._create_round_response(outcome)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Target squares for the piece on the requested square (empty if there is none)."""
        square = Square.from_algebraic(request.square)
        return LegalMovesResponse(
            square=request.square,
            legal_moves=[
                target.to_algebraic() for target in self.game.legal_destinations(square)
            ],
        )

    def reset(self) -> GameResponse:
        """Start over from the starting position."""
        self.game.reset()
        return self._create_game_response()

    # -- Internal helpers --
    def _create_game_response(self) -> GameResponse:
        game = self.game
        return GameResponse(
            board_fen=game.board.to_fen(),
            board_text=game.board.to_text(),
            current_player=game.current_player,
            pending_moves={
                str(color): move.to_text() if move is not None else None
                for color, move in game.pending_moves.items()
            },
            confirmed={str(color): flag for color, flag in game.confirmed.items()},
            ready_to_resolve=game.ready_to_resolve,
            history=[
                self._create_round_record(round_number, outcome)
                for round_number, outcome in enumerate(game.history, start=1)
            ],
            last_move_squares=sorted(
                square.to_algebraic() for square in game.last_move_squares
            ),
            game_over=game.game_over(),
        )

    def _create_round_record(self, round_number: int, outcome: Outcome) -> RoundRecord:
        # for the type checker: only successful outcomes go into the history
        assert outcome.white_notation is not None and outcome.black_notation is not None
        return RoundRecord(
            round_number=round_number,
            white_move=outcome.white_notation,
            black_move=outcome.black_notation,
            conflicts=list(outcome.conflicts),
        )

    def _create_round_response(self, outcome: Outcome) -> RoundResponse:
        if outcome.success:
            _log.debug("Round resolved, touched %d squares", len(outcome.touched_squares))
        return RoundResponse(
            success=outcome.success,
            message=outcome.message,
            white_move=outcome.white_notation,
            black_move=outcome.black_notation,
            conflicts=list(outcome.conflicts),
            touched_squares=sorted(
                square.to_algebraic() for square in outcome.touched_squares
            ),
            game_over=self.game.game_over(),
        )
