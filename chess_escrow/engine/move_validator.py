"""
Orchestrates the rules engine for one move attempt:
encoding check -> turn ownership -> decode board/move -> legality -> apply -> new match state.
"""

import logging
from dataclasses import dataclass

from chess_escrow.core.exceptions import (
    IllegalMoveError,
    InvalidMoveEncodingError,
    MatchAlreadyFinishedError,
    NotYourTurnError,
    StillAwaitingOpponentError,
)
from chess_escrow.core.models import (
    Address,
    AwaitingOpponent,
    Drawn,
    Match,
    OnGoing,
    Won,
)
from chess_escrow.core.shared_types import GameStatus, Side
from chess_escrow.engine.rules import Board, RulesEngine

logger = logging.getLogger(__name__)

# from-square + to-square, e.g. 'e2e4'. No promotion suffix.
MOVE_ENCODING_LENGTH = 4


@dataclass(frozen=True)
class PlayedMove:
    """Result of a legal move: the re-encoded board and the state derived from it."""

    board: str
    state: OnGoing | Won | Drawn


class MoveValidator:
    def __init__(self, engine: RulesEngine) -> None:
        self.engine = engine

    def check_encoding(self, move: str) -> None:
        if len(move) != MOVE_ENCODING_LENGTH:
            raise InvalidMoveEncodingError(
                f"Move must be {MOVE_ENCODING_LENGTH} characters (from-square + to-square), got {move!r}."
            )

    def check_turn(self, chess_match: Match, player: Address) -> None:
        """Only the side to move may play. White is the challenger, black the opponent."""
        match chess_match.state:
            case AwaitingOpponent():
                raise StillAwaitingOpponentError()
            case Won() | Drawn():
                raise MatchAlreadyFinishedError()
            case OnGoing(turn=Side.WHITE):
                if player != chess_match.challenger:
                    raise NotYourTurnError()
            case OnGoing(turn=Side.BLACK):
                if player != chess_match.opponent:
                    raise NotYourTurnError()

    def play(self, encoded_board: str, move: str) -> PlayedMove:
        """
        Apply a move to a stored board.
        ----

        InvalidBoardEncodingError here means the stored board got corrupted; it is never the player's fault.
        """
        board = self.engine.decode_board(encoded_board)
        engine_move = self.engine.decode_move(move)
        if not self.engine.is_legal(board, engine_move):
            raise IllegalMoveError(f"Move not allowed: {move}")

        new_board = self.engine.apply(board, engine_move)
        state = self._derive_state(new_board)
        logger.debug("Applied %s, new state %s", move, state)
        return PlayedMove(board=self.engine.encode_board(new_board), state=state)

    def _derive_state(self, board: Board) -> OnGoing | Won | Drawn:
        match self.engine.status(board):
            case GameStatus.WON:
                return Won()
            case GameStatus.DRAWN:
                return Drawn()
            case GameStatus.ONGOING:
                return OnGoing(self.engine.side_to_move(board))
