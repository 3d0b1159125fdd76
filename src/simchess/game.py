"""
The GameState is the entrypoint into the domain layer for the service layer.
It keeps track of everything needed to play rounds of simultaneous chess:

1. white enters (and confirms) a move
2. black enters (and confirms) a move
3. both moves get resolved together, the outcome goes into the history
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import GameStateError, IllegalMoveError, NotYourTurnError
from src.core.shared_types import Color, PieceType
from src.simchess.board import Board
from src.simchess.moves import Move, is_legal, legal_destinations
from src.simchess.resolution import CollisionRule, Outcome, resolve
from src.simchess.square import Square

_log = logging.getLogger(__name__)


def is_game_over(board: Board) -> Optional[str]:
    """
    The game ends when a king gets captured.
    Returns the message announcing the winner, or None if the game continues.
    """
    kings_left = {
        piece.color
        for row in board.grid
        for piece in row
        if piece is not None and piece.type == PieceType.KING
    }
    if not kings_left:
        # both kings go down together in a mutual capture or an equal-value collision
        return "Draw - both kings captured!"
    if Color.WHITE not in kings_left:
        return "Black wins - White king captured!"
    if Color.BLACK not in kings_left:
        return "White wins - Black king captured!"
    return None


def _no_moves() -> dict[Color, Optional[Move]]:
    return {Color.WHITE: None, Color.BLACK: None}


def _no_confirmations() -> dict[Color, bool]:
    return {Color.WHITE: False, Color.BLACK: False}


@dataclass
class GameState:
    board: Board
    pending_moves: dict[Color, Optional[Move]] = field(default_factory=_no_moves)
    confirmed: dict[Color, bool] = field(default_factory=_no_confirmations)
    # only decides whose move is being entered. Resolution itself treats both sides the same.
    current_player: Color = Color.WHITE
    history: list[Outcome] = field(default_factory=list)
    last_move_squares: frozenset[Square] = field(default_factory=frozenset)
    collision_rule: CollisionRule = CollisionRule.HIGHER_VALUE_WINS

    @classmethod
    def new(
        cls,
        board: Optional[Board] = None,
        collision_rule: CollisionRule = CollisionRule.HIGHER_VALUE_WINS,
    ) -> Self:
        """Standard starting position, unless a board is supplied (handy for setting up positions)"""
        return cls(
            board=board if board is not None else Board.initial(),
            collision_rule=collision_rule,
        )

    def reset(self) -> None:
        """Back to the starting position: clears history, pending moves and confirmations. The collision rule is kept."""
        fresh = self.new(collision_rule=self.collision_rule)
        self.board = fresh.board
        self.pending_moves = fresh.pending_moves
        self.confirmed = fresh.confirmed
        self.current_player = fresh.current_player
        self.history = fresh.history
        self.last_move_squares = fresh.last_move_squares
        _log.info("Game reset to the starting position")

    @property
    def round_number(self) -> int:
        """Number of the round currently being played (starting at 1)"""
        return len(self.history) + 1

    @property
    def ready_to_resolve(self) -> bool:
        return all(self.confirmed.values())

    def game_over(self) -> Optional[str]:
        return is_game_over(self.board)

    def legal_destinations(self, square: Square) -> list[Square]:
        """Where can the piece on this square go? (Read-only, safe to call at any time)"""
        return legal_destinations(self.board, square)

    def submit_move(self, color: Color, move: Move) -> None:
        """
        Store the move as the pending move of the player
        ----

        1. The game must still be going on
        2. It must be your turn to enter a move, and you have not locked in your move yet
        3. You must move one of your own pieces, following its movement rules

        A previously submitted (unconfirmed) move gets replaced.
        """
        self._assert_in_progress()
        self._assert_your_turn(color)
        if self.confirmed[color]:
            raise GameStateError(
                f"{color.capitalize()} already confirmed a move this round."
            )

        piece = self.board.piece_at(move.from_square)
        if piece is None or piece.color != color:
            raise IllegalMoveError(
                f"No {color} piece on {move.from_square.to_algebraic()} to move."
            )
        if not is_legal(self.board, move.from_square, move.to_square):
            raise IllegalMoveError(f"Move not allowed: {move.to_text()}")

        self.pending_moves[color] = move
        _log.debug("%s submitted %s", color, move.to_text())

    def clear_move(self, color: Color) -> None:
        """Take back a pending move, as long as it is not confirmed"""
        self._assert_your_turn(color)
        if self.confirmed[color]:
            raise GameStateError(
                f"{color.capitalize()} already confirmed a move this round."
            )
        self.pending_moves[color] = None

    def confirm_move(self, color: Color) -> None:
        """Lock in the pending move. Once white confirms, black gets to enter a move."""
        self._assert_your_turn(color)
        if self.pending_moves[color] is None:
            raise GameStateError(f"{color.capitalize()} has no move to confirm.")

        self.confirmed[color] = True
        if color == Color.WHITE:
            self.current_player = Color.BLACK
        _log.debug("%s confirmed the move", color)

    def resolve_round(self) -> Outcome:
        """
        Execute both pending moves together.
        ---

        On success: the outcome goes into the history, the pending moves and confirmations are cleared,
        and white gets to enter the next move.
        On failure: the board and both pending moves stay as they are.
        NOTE: after an invalid move, the rejected side gets its turn back (unconfirmed) so it can enter another move.
        The other side stays confirmed, so the round can be resolved once the new move is confirmed.
        """
        outcome = resolve(
            self.board,
            self.pending_moves[Color.WHITE],
            self.pending_moves[Color.BLACK],
            self.collision_rule,
        )
        if not outcome.success:
            _log.warning("Round %d not resolved: %s", self.round_number, outcome.message)
            if outcome.failure is not None and outcome.failure.color is not None:
                self._reopen(outcome.failure.color)
            return outcome

        self.history.append(outcome)
        self.last_move_squares = outcome.touched_squares
        self.pending_moves = _no_moves()
        self.confirmed = _no_confirmations()
        self.current_player = Color.WHITE

        _log.info(
            "Round %d: white %s, black %s%s",
            len(self.history),
            outcome.white_notation,
            outcome.black_notation,
            f" ({', '.join(outcome.conflicts)})" if outcome.conflicts else "",
        )
        game_over_message = self.game_over()
        if game_over_message is not None:
            _log.info(game_over_message)
        return outcome

    # -- PRIVATE HELPERS ---
    def _reopen(self, color: Color) -> None:
        """Hand the turn back to a side whose move got rejected"""
        self.confirmed[color] = False
        self.current_player = color

    def _assert_in_progress(self) -> None:
        message = self.game_over()
        if message is not None:
            raise GameStateError(f"Game is over. {message}")

    def _assert_your_turn(self, color: Color) -> None:
        """Moves are entered one player at a time: white first, then black."""
        if color != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_player} to enter a move first."
            )


def reset() -> GameState:
    """A fresh game in the starting position"""
    return GameState.new()
