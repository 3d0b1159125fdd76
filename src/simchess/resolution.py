"""
Resolution of a round: both players' moves are executed together on the same board.
----

Both moves are validated against the board as it stood BEFORE the round. A move is never
invalidated by what the opponent does in the same round.

The interaction between the two moves is classified in this order (first match wins):

1. Mutual capture: each piece moves onto the other's starting square. Both pieces are removed.
2. Collision: both pieces move onto the same square. The more valuable piece takes the square
   (unless the CollisionRule says otherwise), the other one is removed. Equal values remove both.
3. Independent moves: both pieces are lifted, then each lands on its target square and captures whatever stands there.

NOTE: a round that cannot be resolved is reported in the Outcome and leaves the board untouched.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Self

from src.core.shared_types import Color
from src.simchess.board import Board
from src.simchess.moves import Move, is_legal, notate
from src.simchess.pieces import Piece
from src.simchess.square import Square

MISSING_MOVE_MESSAGE = "Both players must have moves"


class Interaction(Enum):
    MUTUAL_CAPTURE = auto()
    COLLISION = auto()
    INDEPENDENT = auto()


class CollisionRule(Enum):
    """Which piece takes the square when both pieces move onto it (equal values always remove both)"""

    HIGHER_VALUE_WINS = auto()
    LOWER_VALUE_WINS = auto()


class FailureKind(Enum):
    MISSING_MOVE = auto()
    INVALID_MOVE = auto()


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    # only set for an invalid move: the side whose move got rejected
    color: Optional[Color] = None


@dataclass(frozen=True)
class Outcome:
    """Result of an attempt to resolve a round. Successful outcomes end up in the game history."""

    success: bool
    message: Optional[str] = None
    white_notation: Optional[str] = None
    black_notation: Optional[str] = None
    conflicts: tuple[str, ...] = ()
    touched_squares: frozenset[Square] = field(default_factory=frozenset)
    interaction: Optional[Interaction] = None
    failure: Optional[Failure] = None

    @classmethod
    def failed(cls, failure: Failure, message: str) -> Self:
        return cls(success=False, message=message, failure=failure)


def classify(white_move: Move, black_move: Move) -> Interaction:
    """Decide how the two moves interact. Mutual capture is checked first, as it is the more specific case."""
    if (
        white_move.to_square == black_move.from_square
        and black_move.to_square == white_move.from_square
    ):
        return Interaction.MUTUAL_CAPTURE
    if white_move.to_square == black_move.to_square:
        return Interaction.COLLISION
    return Interaction.INDEPENDENT


def resolve(
    board: Board,
    white_move: Optional[Move],
    black_move: Optional[Move],
    collision_rule: CollisionRule = CollisionRule.HIGHER_VALUE_WINS,
) -> Outcome:
    """
    Execute both moves on the board
    -----

    1. both moves must be present
    2. validate white's move, then black's move (on the board before the round)
    3. snapshot the moving pieces
    4. classify the interaction and update the board accordingly
    5. write down the notation, using the pieces as they were before the round
    """
    if white_move is None or black_move is None:
        return Outcome.failed(Failure(FailureKind.MISSING_MOVE), MISSING_MOVE_MESSAGE)

    for color, move in ((Color.WHITE, white_move), (Color.BLACK, black_move)):
        if not _is_valid_for(board, move, color):
            return Outcome.failed(
                Failure(FailureKind.INVALID_MOVE, color), f"Invalid {color} move"
            )

    # Snapshot BEFORE anything changes on the board
    white_piece = board.piece_at(white_move.from_square)
    black_piece = board.piece_at(black_move.from_square)
    # for the typechecker: validation guarantees a piece on both starting squares
    assert white_piece is not None and black_piece is not None

    interaction = classify(white_move, black_move)
    if interaction == Interaction.MUTUAL_CAPTURE:
        conflicts, touched = _resolve_mutual_capture(board, white_move, black_move)
    elif interaction == Interaction.COLLISION:
        conflicts, touched = _resolve_collision(
            board, white_move, white_piece, black_move, black_piece, collision_rule
        )
    else:
        conflicts, touched = _resolve_independent(board, white_move, black_move)

    return Outcome(
        success=True,
        white_notation=notate(white_move, white_piece),
        black_notation=notate(black_move, black_piece),
        conflicts=tuple(conflicts),
        touched_squares=frozenset(touched),
        interaction=interaction,
    )


def _is_valid_for(board: Board, move: Move, color: Color) -> bool:
    """Legal move, made with a piece of the right color"""
    if not is_legal(board, move.from_square, move.to_square):
        return False
    piece = board.piece_at(move.from_square)
    return piece is not None and piece.color == color


# -- BOARD UPDATES PER INTERACTION ---
Resolution = tuple[list[str], list[Square]]


def _resolve_mutual_capture(board: Board, white_move: Move, black_move: Move) -> Resolution:
    """The pieces pass through each other: neither of them survives."""
    board.remove_piece(white_move.from_square)
    board.remove_piece(black_move.from_square)
    return (
        ["Mutual capture - both pieces removed"],
        [white_move.from_square, black_move.from_square],
    )


def _resolve_collision(
    board: Board,
    white_move: Move,
    white_piece: Piece,
    black_move: Move,
    black_piece: Piece,
    collision_rule: CollisionRule,
) -> Resolution:
    """
    Both pieces want the same square.
    ---

    * equal value: both are removed
    * otherwise: the winning piece moves in, the other one is removed from its starting square.
      By default the more valuable piece wins, `CollisionRule.LOWER_VALUE_WINS` lets the cheaper piece win instead.

    NOTE: the contested square is always empty. A piece on it would belong to one of the two players, and neither may move onto their own piece.
    """
    if white_piece.value == black_piece.value:
        board.remove_piece(white_move.from_square)
        board.remove_piece(black_move.from_square)
        note = "Collision - both pieces removed"
    elif _white_wins_collision(white_piece, black_piece, collision_rule):
        board.remove_piece(black_move.from_square)
        board.move_piece(white_move.from_square, white_move.to_square)
        note = "Collision - Black piece removed, White moves"
    else:
        board.remove_piece(white_move.from_square)
        board.move_piece(black_move.from_square, black_move.to_square)
        note = "Collision - White piece removed, Black moves"
    return [note], [white_move.to_square]


def _white_wins_collision(
    white_piece: Piece, black_piece: Piece, collision_rule: CollisionRule
) -> bool:
    """Only called for pieces of different value"""
    if collision_rule == CollisionRule.HIGHER_VALUE_WINS:
        return white_piece.value > black_piece.value
    return white_piece.value < black_piece.value


def _resolve_independent(board: Board, white_move: Move, black_move: Move) -> Resolution:
    """
    Each piece moves to its target square and captures whatever is standing there.
    ---

    Both pieces are lifted before either lands. So a piece moving onto the square the opponent
    just left does not capture anything: the opponent's piece was already on its way.
    """
    white_piece = board.remove_piece(white_move.from_square)
    black_piece = board.remove_piece(black_move.from_square)
    # for the typechecker: validated before
    assert white_piece is not None and black_piece is not None

    conflicts: list[str] = []
    captured_by_white = board.remove_piece(white_move.to_square)
    board.place_piece(white_piece, white_move.to_square)
    if captured_by_white is not None:
        conflicts.append(f"White captures {captured_by_white.type}")

    captured_by_black = board.remove_piece(black_move.to_square)
    board.place_piece(black_piece, black_move.to_square)
    if captured_by_black is not None:
        conflicts.append(f"Black captures {captured_by_black.type}")

    return conflicts, [
        white_move.from_square,
        white_move.to_square,
        black_move.from_square,
        black_move.to_square,
    ]
