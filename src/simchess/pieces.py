"""Defines the chess pieces and the lookup tables keyed by piece type"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


# Used to settle a collision: the more valuable piece takes the square.
# NOTE: the King has to outrank everything, so it gets an arbitrary large value
PIECE_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 100,
}

# Pawns are written without a letter (e2-e4)
PIECE_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

PIECE_SYMBOLS: dict[Color, dict[PieceType, str]] = {
    Color.WHITE: {
        PieceType.KING: "♔",
        PieceType.QUEEN: "♕",
        PieceType.ROOK: "♖",
        PieceType.BISHOP: "♗",
        PieceType.KNIGHT: "♘",
        PieceType.PAWN: "♙",
    },
    Color.BLACK: {
        PieceType.KING: "♚",
        PieceType.QUEEN: "♛",
        PieceType.ROOK: "♜",
        PieceType.BISHOP: "♝",
        PieceType.KNIGHT: "♞",
        PieceType.PAWN: "♟",
    },
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @property
    def value(self) -> int:
        return PIECE_VALUES[self.type]

    @property
    def letter(self) -> str:
        return PIECE_LETTERS[self.type]

    @property
    def symbol(self) -> str:
        return PIECE_SYMBOLS[self.color][self.type]
