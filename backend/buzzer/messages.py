"""Inbound protocol messages.

Each Socket.IO event the server accepts has exactly one frozen dataclass
here, keyed by its wire tag in ``MESSAGE_TYPES``. ``parse_message`` turns a
raw ``(tag, payload)`` pair into one of these, raising ``MalformedMessage``
when the payload does not fit.
"""
from dataclasses import dataclass
from typing import Any, Dict, Type, Union

from .errors import MalformedMessage
from .models import MatchRef, Round, ROUND_SIZES

MAX_NAME_LENGTH = 40


@dataclass(frozen=True)
class AdminJoin:
    TAG = 'admin-join'


@dataclass(frozen=True)
class TeamJoin:
    name: str
    TAG = 'team-join'


@dataclass(frozen=True)
class StartTournament:
    TAG = 'start-tournament'


@dataclass(frozen=True)
class ResetTournament:
    TAG = 'reset-tournament'


@dataclass(frozen=True)
class SelectMatch:
    ref: MatchRef
    TAG = 'select-match'


@dataclass(frozen=True)
class SpinWheel:
    TAG = 'spin-wheel'


@dataclass(frozen=True)
class StartRound:
    TAG = 'start-round'


@dataclass(frozen=True)
class Buzz:
    TAG = 'buzz'


@dataclass(frozen=True)
class CorrectAnswer:
    TAG = 'correct-answer'


@dataclass(frozen=True)
class WrongAnswer:
    TAG = 'wrong-answer'


@dataclass(frozen=True)
class KickTeam:
    name: str
    TAG = 'kick-team'


@dataclass(frozen=True)
class Ping:
    TAG = 'ping'


Message = Union[
    AdminJoin, TeamJoin, StartTournament, ResetTournament, SelectMatch,
    SpinWheel, StartRound, Buzz, CorrectAnswer, WrongAnswer, KickTeam, Ping,
]

MESSAGE_TYPES: Dict[str, Type] = {
    cls.TAG: cls for cls in (
        AdminJoin, TeamJoin, StartTournament, ResetTournament, SelectMatch,
        SpinWheel, StartRound, Buzz, CorrectAnswer, WrongAnswer, KickTeam, Ping,
    )
}


def _team_name(tag: str, data: Dict[str, Any]) -> str:
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        raise MalformedMessage(tag, 'name is required')
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise MalformedMessage(tag, f'name longer than {MAX_NAME_LENGTH} characters')
    return name


def _match_ref(tag: str, data: Dict[str, Any]) -> MatchRef:
    try:
        round_ = Round(data.get('round'))
    except ValueError:
        raise MalformedMessage(tag, f"unknown round {data.get('round')!r}")
    if round_ == Round.FINAL:
        # Only one final; whatever index the client sent is irrelevant
        return MatchRef(round_, 0)
    index = data.get('index')
    # bool is an int subclass; reject it explicitly
    if isinstance(index, bool) or not isinstance(index, int):
        raise MalformedMessage(tag, 'index must be an integer')
    if not 0 <= index < ROUND_SIZES[round_]:
        raise MalformedMessage(tag, f'index {index} out of range for {round_.value}')
    return MatchRef(round_, index)


def parse_message(tag: str, data: Any) -> Message:
    """Build the message for ``tag`` from a decoded JSON payload."""
    cls = MESSAGE_TYPES.get(tag)
    if cls is None:
        raise MalformedMessage(tag, 'unknown message type')
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedMessage(tag, 'payload must be an object')

    if cls is TeamJoin:
        return TeamJoin(name=_team_name(tag, data))
    if cls is KickTeam:
        return KickTeam(name=_team_name(tag, data))
    if cls is SelectMatch:
        return SelectMatch(ref=_match_ref(tag, data))
    return cls()
