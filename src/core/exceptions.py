"""
Custom exceptions raised by the domain and service layers.

Catching `GameError` is enough to handle anything the game itself refuses to do.
NOTE: a round that cannot be resolved is NOT an exception, it is reported through the Outcome.
"""


class GameError(Exception):
    """Top-level exception for everything raised by this package"""


class GameStateError(GameError):
    """The request does not fit the current state of the game (game over, move already confirmed, ...)"""


class IllegalMoveError(GameError):
    """The submitted move breaks the movement rules of the piece (or there is no piece of yours to move)"""


class NotYourTurnError(GameError):
    """Moves are entered one colour at a time, even though they are executed together"""


class InvalidRequestError(GameError):
    """A request that cannot be interpreted, e.g. a badly written square name"""
