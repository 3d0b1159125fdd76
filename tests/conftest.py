"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.simchess.board import EMPTY_POSITION, Board
from src.simchess.game import GameState
from src.simchess.pieces import Piece
from src.simchess.square import Square


@pytest.fixture
def empty_board() -> Board:
    return Board.from_fen(EMPTY_POSITION)


@pytest.fixture
def board_with_pieces() -> Callable[[dict[str, str]], Board]:
    """Call the inner function with a mapping of square name -> FEN character, ex. {"e1": "K", "e8": "k"}"""

    def _create_board(pieces: dict[str, str]) -> Board:
        board = Board.from_fen(EMPTY_POSITION)
        for square_name, fen_char in pieces.items():
            board.place_piece(Piece.from_fen(fen_char), Square.from_algebraic(square_name))
        return board

    return _create_board


@pytest.fixture
def new_game() -> GameState:
    """Game in the standard starting position"""
    return GameState.new()
