"""Unit tests for chess_escrow/engine/move_validator.py"""

import pytest

from chess_escrow.core.exceptions import (
    IllegalMoveError,
    InvalidBoardEncodingError,
    InvalidMoveEncodingError,
    MatchAlreadyFinishedError,
    NotYourTurnError,
    StillAwaitingOpponentError,
)
from chess_escrow.core.models import (
    AwaitingOpponent,
    Coin,
    Drawn,
    Match,
    MatchState,
    OnGoing,
    Won,
)
from chess_escrow.core.shared_types import Side
from chess_escrow.engine.move_validator import MoveValidator
from chess_escrow.engine.rules import PythonChessEngine

WHITE_PLAYER = "neutron1m9l358xunhhwds0568za49mzhvuxx9ux8xafx2"
BLACK_PLAYER = "neutron10h9stc5v6ntgeygf5xf945njqq5h32r54rf7kf"
STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
BEFORE_FOOLS_MATE = "rnbqkbnr/pppp1ppp/8/4p3/6P1/5P2/PPPPP2P/RNBQKBNR b KQkq - 0 2"
BEFORE_STALEMATE = "7k/4Q3/6K1/8/8/8/8/8 w - - 0 1"


@pytest.fixture
def validator() -> MoveValidator:
    return MoveValidator(PythonChessEngine())


def mock_match(state: MatchState) -> Match:
    return Match(
        challenger=WHITE_PLAYER,
        opponent=BLACK_PLAYER,
        board=STARTING_FEN,
        state=state,
        nonce=0,
        last_move=0,
        start=0,
        bet=Coin(10, "untrn"),
    )


# -- encoding --
@pytest.mark.parametrize("move", ["", "e", "e2e", "e7e8q", "e1e2e3"])
def test_move_must_be_four_characters(validator: MoveValidator, move: str) -> None:
    with pytest.raises(InvalidMoveEncodingError):
        validator.check_encoding(move)


def test_four_characters_pass_the_encoding_check(validator: MoveValidator) -> None:
    validator.check_encoding("e2e4")


# -- turn ownership --
@pytest.mark.parametrize(
    ("state", "player"),
    [
        (OnGoing(Side.WHITE), WHITE_PLAYER),
        (OnGoing(Side.BLACK), BLACK_PLAYER),
    ],
)
def test_side_to_move_may_play(validator: MoveValidator, state: MatchState, player: str) -> None:
    validator.check_turn(mock_match(state), player)


@pytest.mark.parametrize(
    ("state", "player", "error"),
    [
        (AwaitingOpponent(), WHITE_PLAYER, StillAwaitingOpponentError),
        (AwaitingOpponent(), BLACK_PLAYER, StillAwaitingOpponentError),
        (Won(), WHITE_PLAYER, MatchAlreadyFinishedError),
        (Drawn(), BLACK_PLAYER, MatchAlreadyFinishedError),
        (OnGoing(Side.WHITE), BLACK_PLAYER, NotYourTurnError),
        (OnGoing(Side.BLACK), WHITE_PLAYER, NotYourTurnError),
        (OnGoing(Side.WHITE), "neutron1qypqxpq9qcrsszg2pvxq6rs0zqg3yyc5lzv7xu", NotYourTurnError),
    ],
)
def test_turn_violations(
    validator: MoveValidator, state: MatchState, player: str, error: type[Exception]
) -> None:
    with pytest.raises(error):
        validator.check_turn(mock_match(state), player)


# -- playing --
def test_play_ongoing(validator: MoveValidator) -> None:
    played = validator.play(STARTING_FEN, "e2e4")
    assert played.state == OnGoing(Side.BLACK)
    assert played.board == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"


def test_play_checkmate(validator: MoveValidator) -> None:
    played = validator.play(BEFORE_FOOLS_MATE, "d8h4")
    assert played.state == Won()
    assert played.board == "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


def test_play_stalemate(validator: MoveValidator) -> None:
    played = validator.play(BEFORE_STALEMATE, "e7f7")
    assert played.state == Drawn()


def test_illegal_move(validator: MoveValidator) -> None:
    with pytest.raises(IllegalMoveError):
        validator.play(STARTING_FEN, "e2e5")


def test_undecodable_move(validator: MoveValidator) -> None:
    with pytest.raises(InvalidMoveEncodingError):
        validator.play(STARTING_FEN, "1234")


def test_corrupt_board(validator: MoveValidator) -> None:
    with pytest.raises(InvalidBoardEncodingError):
        validator.play("corrupted board", "e2e4")
