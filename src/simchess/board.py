"""The Game board: an 8x8 grid holding at most one piece per square"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional, Self

from src.core.shared_types import Color, PieceType
from src.simchess.pieces import Piece
from src.simchess.square import BOARD_DIMENSIONS, Square

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION = "/".join(["8"] * BOARD_DIMENSIONS[0])

Grid = list[list[Optional[Piece]]]


@dataclass
class Board:
    grid: Grid

    @classmethod
    def empty(cls) -> Self:
        return cls(
            [[None] * BOARD_DIMENSIONS[1] for _ in range(BOARD_DIMENSIONS[0])]
        )

    @classmethod
    def initial(cls) -> Self:
        """Standard chess starting arrangement"""
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with the rook on a8
        * pawns cover the 7th rank (row 1) entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.
        """
        board = cls.empty()
        # FEN string is read from the top rank (8th) down, which conveniently is our row 0
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    board.grid[row][col] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in self.grid[row]:
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def to_text(self) -> list[str]:
        """One line per row, row 0 (Black's side) first. Empty squares are shown as dots."""
        return [
            " ".join(piece.symbol if piece else "." for piece in row)
            for row in self.grid
        ]

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.grid[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.piece_at(square) is None

    def place_piece(self, piece: Piece, square: Square) -> None:
        self.grid[square.row][square.col] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        """Clear the square and hand back whatever stood there"""
        piece = self.piece_at(square)
        self.grid[square.row][square.col] = None
        return piece

    def move_piece(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """Move a piece, returning the piece it captured (if any)"""
        captured = self.piece_at(to_square)
        self.grid[to_square.row][to_square.col] = self.remove_piece(from_square)
        return captured

    def squares(self) -> list[Square]:
        return [
            Square(row, col)
            for row in range(BOARD_DIMENSIONS[0])
            for col in range(BOARD_DIMENSIONS[1])
        ]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        target = Piece(piece_type, color)
        return [square for square in self.squares() if self.piece_at(square) == target]

    def has_king(self, color: Color) -> bool:
        return bool(self.locate_pieces(PieceType.KING, color))

    def copy(self) -> Self:
        return deepcopy(self)


def initial_board() -> Board:
    return Board.initial()


def piece_at(board: Board, square: Square) -> Optional[Piece]:
    """Pure lookup"""
    return board.piece_at(square)
