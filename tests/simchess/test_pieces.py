"""Unit tests for /src/simchess/pieces.py"""

from dataclasses import FrozenInstanceError

import pytest

from src.core.shared_types import Color, PieceType
from src.simchess.pieces import (
    FEN_TO_PIECE,
    PIECE_LETTERS,
    PIECE_SYMBOLS,
    PIECE_TO_FEN,
    PIECE_VALUES,
    Piece,
)


@pytest.mark.parametrize("char", [char.upper() for char in FEN_TO_PIECE.keys()])
def test_creating_white_piece_from_fen(char: str) -> None:
    """Capital letters are used for white pieces"""
    piece = Piece.from_fen(char)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.WHITE


@pytest.mark.parametrize("char", [char.lower() for char in FEN_TO_PIECE.keys()])
def test_creating_black_piece_from_fen(char: str) -> None:
    """Lower case letters are used for black pieces"""
    piece = Piece.from_fen(char)
    assert piece.type == FEN_TO_PIECE[char.lower()]
    assert piece.color == Color.BLACK


@pytest.mark.parametrize("piece_type", list(PieceType))
def test_pieces_to_fen(piece_type: PieceType) -> None:
    assert Piece(piece_type, Color.WHITE).to_fen() == PIECE_TO_FEN[piece_type].upper()
    assert Piece(piece_type, Color.BLACK).to_fen() == PIECE_TO_FEN[piece_type].lower()


@pytest.mark.parametrize(
    "table", [PIECE_VALUES, PIECE_LETTERS, PIECE_TO_FEN, *PIECE_SYMBOLS.values()]
)
def test_tables_cover_every_piece_type(table: dict[PieceType, object]) -> None:
    """No piece type may be missing from any lookup table"""
    assert set(table.keys()) == set(PieceType)


def test_piece_values() -> None:
    """The king outranks everything else in a collision"""
    assert Piece(PieceType.PAWN, Color.WHITE).value == 1
    assert Piece(PieceType.KNIGHT, Color.WHITE).value == 3
    assert Piece(PieceType.BISHOP, Color.BLACK).value == 3
    assert Piece(PieceType.ROOK, Color.BLACK).value == 5
    assert Piece(PieceType.QUEEN, Color.WHITE).value == 9
    assert Piece(PieceType.KING, Color.BLACK).value == 100


def test_piece_symbols() -> None:
    assert Piece(PieceType.KING, Color.WHITE).symbol == "♔"
    assert Piece(PieceType.PAWN, Color.BLACK).symbol == "♟"


def test_pieces_are_immutable() -> None:
    piece = Piece(PieceType.PAWN, Color.WHITE)
    with pytest.raises(FrozenInstanceError):
        piece.type = PieceType.QUEEN  # type: ignore[misc]


def test_opponent_color() -> None:
    assert Color.WHITE.opponent == Color.BLACK
    assert Color.BLACK.opponent == Color.WHITE
