"""
Rules engine capability.

The match lifecycle never looks inside a board. It only needs: decode / encode a board, decode a move,
ask if the move is legal, apply it, and ask what the resulting position means (ongoing / won / drawn).
PythonChessEngine implements this with python-chess.
"""

from typing import Any, Protocol

import chess

from chess_escrow.core.exceptions import InvalidBoardEncodingError, InvalidMoveEncodingError
from chess_escrow.core.shared_types import GameStatus, Side

# Engine-native objects are opaque to the rest of the application
Board = Any
EngineMove = Any

# Fifty full moves without a capture or pawn move
FIFTY_MOVE_HALF_MOVES = 100


class RulesEngine(Protocol):
    """What the match lifecycle needs from a chess implementation."""

    def initial_board(self) -> str:
        """Encoded starting position."""
        ...

    def decode_board(self, encoded: str) -> Board:
        """Raise InvalidBoardEncodingError if the text is not a valid position."""
        ...

    def encode_board(self, board: Board) -> str: ...

    def decode_move(self, encoded: str) -> EngineMove:
        """Raise InvalidMoveEncodingError if the text is not a move."""
        ...

    def is_legal(self, board: Board, move: EngineMove) -> bool: ...

    def apply(self, board: Board, move: EngineMove) -> Board:
        """Return the position after the move. Input board is left untouched."""
        ...

    def status(self, board: Board) -> GameStatus: ...

    def side_to_move(self, board: Board) -> Side: ...


class PythonChessEngine:
    """RulesEngine backed by python-chess. Boards are FEN strings at the boundary."""

    def initial_board(self) -> str:
        return self.encode_board(chess.Board())

    def decode_board(self, encoded: str) -> chess.Board:
        try:
            board = chess.Board(encoded)
        except ValueError as exc:
            raise InvalidBoardEncodingError(f"Cannot decode board {encoded!r}") from exc
        if not board.is_valid():
            raise InvalidBoardEncodingError(
                f"Board {encoded!r} is not a valid position: {board.status()!r}"
            )
        return board

    def encode_board(self, board: chess.Board) -> str:
        # NOTE: en_passant="fen" writes the square after every double pawn push, not only when a capture is possible
        return board.fen(en_passant="fen")

    def decode_move(self, encoded: str) -> chess.Move:
        try:
            return chess.Move.from_uci(encoded)
        except ValueError as exc:
            raise InvalidMoveEncodingError(f"Cannot decode move {encoded!r}") from exc

    def is_legal(self, board: chess.Board, move: chess.Move) -> bool:
        return board.is_legal(move)

    def apply(self, board: chess.Board, move: chess.Move) -> chess.Board:
        new_board = board.copy(stack=False)
        new_board.push(move)
        return new_board

    def status(self, board: chess.Board) -> GameStatus:
        if board.is_checkmate():
            return GameStatus.WON
        if self._is_draw(board):
            return GameStatus.DRAWN
        return GameStatus.ONGOING

    def side_to_move(self, board: chess.Board) -> Side:
        return Side.WHITE if board.turn == chess.WHITE else Side.BLACK

    def _is_draw(self, board: chess.Board) -> bool:
        """
        Draws that follow from the position alone.
        NOTE: repetition needs the move history, which a single encoded board does not carry.
        """
        return (
            board.is_stalemate()
            or board.is_insufficient_material()
            or board.halfmove_clock >= FIFTY_MOVE_HALF_MOVES
        )
