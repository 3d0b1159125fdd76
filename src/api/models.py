"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color

PieceColor = str


def _is_algebraic_notation(value: str) -> bool:
    """'a1' - 'h8'"""
    if len(value) != 2:
        return False
    file, rank = value[0], value[1]
    return file in "abcdefgh" and rank in "12345678"


# --- REQUEST MODELS ---
class SubmitMoveRequest(BaseModel):
    color: Color
    from_square: str
    to_square: str

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        value = value.strip().lower()
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


class ColorRequest(BaseModel):
    """Used for confirming / clearing the pending move of one side"""

    color: Color


class LegalMovesRequest(BaseModel):
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        value = value.strip().lower()
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value


# --- RESPONSE MODELS ---
class RoundRecord(BaseModel):
    """One entry of the move history"""

    round_number: int
    white_move: str
    black_move: str
    conflicts: list[str]


class RoundResponse(BaseModel):
    success: bool
    message: Optional[str]
    white_move: Optional[str]
    black_move: Optional[str]
    conflicts: list[str]
    touched_squares: list[str]
    game_over: Optional[str]


class GameResponse(BaseModel):
    board_fen: str
    board_text: list[str]
    current_player: Color
    pending_moves: dict[PieceColor, Optional[str]]
    confirmed: dict[PieceColor, bool]
    ready_to_resolve: bool
    history: list[RoundRecord]
    last_move_squares: list[str]
    game_over: Optional[str]


class LegalMovesResponse(BaseModel):
    square: str
    legal_moves: list[str]
