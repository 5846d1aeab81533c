import pytest
from pydantic import ValidationError

from chess_escrow.api.models import (
    AbortMatchMsg,
    CreateMatchMsg,
    ExecuteMsg,
    InstantiateMsg,
    JoinMatchMsg,
    MakeMoveMsg,
    MatchResponse,
)
from chess_escrow.core.exceptions import InvalidMatchIdError, InvalidMoveEncodingError
from chess_escrow.core.identity import derive_match_id, match_id_to_hex
from chess_escrow.core.models import Coin, Match
from chess_escrow.core.shared_types import Side, StateKind

PLAYER_A = "neutron1m9l358xunhhwds0568za49mzhvuxx9ux8xafx2"
PLAYER_B = "neutron10h9stc5v6ntgeygf5xf945njqq5h32r54rf7kf"
MATCH_ID = match_id_to_hex(derive_match_id(PLAYER_A, PLAYER_B, 0))


# -- Validation - match ids --
@pytest.mark.parametrize("message", [AbortMatchMsg, JoinMatchMsg])
def test_valid_match_id(message: type[AbortMatchMsg | JoinMatchMsg]) -> None:
    assert message(match_id=MATCH_ID).match_id == MATCH_ID


@pytest.mark.parametrize(
    "invalid_id",
    [
        "",
        MATCH_ID[:-1],  # too short
        MATCH_ID + "0",  # too long
        MATCH_ID.upper(),  # hex, but not lowercase
        "g" * 64,  # not hex
    ],
)
@pytest.mark.parametrize("message", [AbortMatchMsg, JoinMatchMsg])
def test_invalid_match_id(message: type[AbortMatchMsg | JoinMatchMsg], invalid_id: str) -> None:
    with pytest.raises(InvalidMatchIdError):
        _ = message(match_id=invalid_id)


# -- Validation - MakeMoveMsg --
def test_valid_move() -> None:
    msg = MakeMoveMsg(match_id=MATCH_ID, move="e2e4")
    assert msg.move == "e2e4"


@pytest.mark.parametrize("invalid_move", ["", "e2", "e2e", "e7e8q", "e2-e4"])
def test_move_needs_four_characters(invalid_move: str) -> None:
    with pytest.raises(InvalidMoveEncodingError):
        _ = MakeMoveMsg(match_id=MATCH_ID, move=invalid_move)


def test_make_move_checks_match_id_first() -> None:
    with pytest.raises(InvalidMatchIdError):
        _ = MakeMoveMsg(match_id="nope", move="nope, not a move")


# -- Validation - InstantiateMsg --
def test_valid_instantiate() -> None:
    msg = InstantiateMsg.model_validate({"min_bet": {"amount": 10, "denom": "untrn"}})
    assert msg.min_bet == Coin(10, "untrn")


@pytest.mark.parametrize(
    "min_bet",
    [
        {"amount": -1, "denom": "untrn"},
        {"amount": 10, "denom": ""},
        {"amount": 10},
    ],
)
def test_invalid_instantiate(min_bet: dict) -> None:
    with pytest.raises(ValidationError):
        _ = InstantiateMsg.model_validate({"min_bet": min_bet})


# -- ExecuteMsg envelope --
def test_execute_msg_picks_the_variant() -> None:
    msg = ExecuteMsg.model_validate({"make_move": {"match_id": MATCH_ID, "move": "e2e4"}})
    assert msg.variant == MakeMoveMsg(match_id=MATCH_ID, move="e2e4")

    msg = ExecuteMsg.model_validate({"create_match": {"opponent": PLAYER_B}})
    assert msg.variant == CreateMatchMsg(opponent=PLAYER_B)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"create_match": {"opponent": PLAYER_B}, "abort_match": {"match_id": MATCH_ID}},
        {"resign": {"match_id": MATCH_ID}},
    ],
)
def test_execute_msg_needs_exactly_one_operation(payload: dict) -> None:
    with pytest.raises(ValidationError):
        _ = ExecuteMsg.model_validate(payload)


def test_execute_msg_keeps_domain_errors() -> None:
    with pytest.raises(InvalidMatchIdError):
        _ = ExecuteMsg.model_validate({"join_match": {"match_id": "xyz"}})


# -- Responses --
def test_match_response() -> None:
    chess_match = Match.new(PLAYER_A, PLAYER_B, 0, Coin(10, "untrn"), board="8/8/8/8/8/8/8/8 w - - 0 1")
    response = MatchResponse.from_match(derive_match_id(PLAYER_A, PLAYER_B, 0), chess_match)
    assert response.match_id == MATCH_ID
    assert response.state == StateKind.AWAITING_OPPONENT
    assert response.turn is None

    started = MatchResponse.from_match(
        derive_match_id(PLAYER_A, PLAYER_B, 0), chess_match.started(block_height=5)
    )
    assert started.state == StateKind.ON_GOING
    assert started.turn == Side.WHITE
    assert started.start == 5
