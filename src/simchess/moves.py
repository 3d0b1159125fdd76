"""
Movement rules for every piece type, plus move notation.

Key idea: Use strategy pattern to define the movement rule for each piece type.

Rules only look at the geometry of the move and the squares it passes through.
There is no notion of check, castling, en passant or promotion in this variant.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.core.shared_types import Color, PieceType
from src.simchess.pieces import Piece
from src.simchess.square import Square


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece_at(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def squares(self) -> list[Square]: ...


# White moves up the board (towards row 0), black moves down
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
HOME_ROWS: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}

MOVE_PATTERN = re.compile(r"^([a-h][1-8])\s*-?\s*([a-h][1-8])$")


@dataclass(frozen=True)
class Move:
    """A proposed transition of one piece. Created by a player, consumed by resolution."""

    from_square: Square
    to_square: Square

    @classmethod
    def from_coords(cls, from_row: int, from_col: int, to_row: int, to_col: int) -> Self:
        return cls(Square(from_row, from_col), Square(to_row, to_col))

    @classmethod
    def from_text(cls, text: str) -> Self:
        """
        Accepts "e2-e4" as well as the UCI-like "e2e4".
        Raises ValueError for anything else.
        """
        match = MOVE_PATTERN.match(text.strip().lower())
        if match is None:
            raise ValueError(f"Cannot interpret {text!r} as a move.")
        from_alg, to_alg = match.groups()
        return cls(Square.from_algebraic(from_alg), Square.from_algebraic(to_alg))

    @property
    def delta(self) -> tuple[int, int]:
        """(row delta, col delta), signed"""
        return (
            self.to_square.row - self.from_square.row,
            self.to_square.col - self.from_square.col,
        )

    def to_text(self) -> str:
        return f"{self.from_square.to_algebraic()}-{self.to_square.to_algebraic()}"


# --- PATH HELPERS ---
def _step(delta: int) -> int:
    return (delta > 0) - (delta < 0)


def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """Squares strictly between two squares on a shared rank, file or diagonal"""
    dr = to_square.row - from_square.row
    dc = to_square.col - from_square.col
    row_step, col_step = _step(dr), _step(dc)
    steps = max(abs(dr), abs(dc))
    return [
        Square(from_square.row + i * row_step, from_square.col + i * col_step)
        for i in range(1, steps)
    ]


def is_path_clear(board: Board, from_square: Square, to_square: Square) -> bool:
    return all(board.is_empty(square) for square in squares_between(from_square, to_square))


# --- MOVEMENT RULES ---
def is_legal_pawn_move(board: Board, move: Move, color: Color) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - can move by two from its home row, if both squares are empty.
    - takes diagonally (one square), and only when there is something to take.

    NOTE: no en passant in this variant, so a diagonal onto an empty square is never legal.
    """
    direction = PAWN_DIRECTION[color]
    dr, dc = move.delta
    forward = dr * direction

    # pawn pushes
    if dc == 0:
        if forward == 1:
            return board.is_empty(move.to_square)
        if forward == 2 and move.from_square.row == HOME_ROWS[color]:
            intermediate = Square(move.from_square.row + direction, move.from_square.col)
            return board.is_empty(intermediate) and board.is_empty(move.to_square)
        return False

    # pawn takes
    if abs(dc) == 1 and forward == 1:
        target = board.piece_at(move.to_square)
        return target is not None and target.color == color.opponent

    return False


def is_legal_knight_move(board: Board, move: Move, color: Color) -> bool:
    """Knights jump: |delta_row|, |delta_col| is (2, 1) or (1, 2). Nothing can block them."""
    dr, dc = move.delta
    return {abs(dr), abs(dc)} == {1, 2}


def is_legal_bishop_move(board: Board, move: Move, color: Color) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    dr, dc = move.delta
    return abs(dr) == abs(dc) != 0 and is_path_clear(board, move.from_square, move.to_square)


def is_legal_rook_move(board: Board, move: Move, color: Color) -> bool:
    """Rooks move either horizontally or vertically"""
    dr, dc = move.delta
    return (dr == 0) != (dc == 0) and is_path_clear(board, move.from_square, move.to_square)


def is_legal_queen_move(board: Board, move: Move, color: Color) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_legal_rook_move(board, move, color) or is_legal_bishop_move(
        board, move, color
    )


def is_legal_king_move(board: Board, move: Move, color: Color) -> bool:
    """The king moves a single square in any direction. Standing still is not a move."""
    dr, dc = move.delta
    return max(abs(dr), abs(dc)) == 1


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Board, Move, Color], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: is_legal_pawn_move,
    PieceType.KNIGHT: is_legal_knight_move,
    PieceType.BISHOP: is_legal_bishop_move,
    PieceType.ROOK: is_legal_rook_move,
    PieceType.QUEEN: is_legal_queen_move,
    PieceType.KING: is_legal_king_move,
}


def is_legal(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    Can the piece on `from_square` move to `to_square`?
    ---

    False if there is no piece to move, if either square is off the board,
    or if the destination holds a piece of the mover's own color (which also rules out standing still).
    Otherwise the movement rule of the piece type decides.
    """
    if not (from_square.is_within_bounds() and to_square.is_within_bounds()):
        return False

    piece = board.piece_at(from_square)
    if piece is None:
        return False

    target = board.piece_at(to_square)
    if target is not None and target.color == piece.color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(board, Move(from_square, to_square), piece.color)


def legal_destinations(board: Board, from_square: Square) -> list[Square]:
    """Every square the piece on `from_square` may move to. Used to highlight targets."""
    return [
        square for square in board.squares() if is_legal(board, from_square, square)
    ]


# --- NOTATION ---
def notate(move: Move, piece: Piece) -> str:
    """
    <piece letter><from square>-<to square>, where pawns go without letter.

    ex) pawn e2 to e4: "e2-e4", knight g1 to f3: "Ng1-f3"
    """
    return f"{piece.letter}{move.to_text()}"

