from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

GENRES = ['Ex-Yu', 'Rep', 'Narodna', 'Pop', 'Turbo Folk']
BRACKET_SIZE = 8
FINAL_WINNING_SCORE = 2


class Phase(str, Enum):
    WAITING = 'waiting'
    WHEEL = 'wheel'
    BUZZER = 'buzzer'
    ANSWERING = 'answering'


class Round(str, Enum):
    QUARTERFINALS = 'quarterfinals'
    SEMIFINALS = 'semifinals'
    FINAL = 'final'


# Number of matches per round
ROUND_SIZES = {
    Round.QUARTERFINALS: 4,
    Round.SEMIFINALS: 2,
    Round.FINAL: 1,
}


@dataclass
class Team:
    name: str
    sid: str
    joined_at: float
    disconnected_at: Optional[float] = None

    @property
    def is_connected(self) -> bool:
        return self.disconnected_at is None


@dataclass
class Match:
    team1: Optional[str] = None
    team2: Optional[str] = None
    winner: Optional[str] = None
    active: bool = False

    @property
    def is_ready(self) -> bool:
        return self.team1 is not None and self.team2 is not None

    @property
    def is_resolved(self) -> bool:
        return self.winner is not None

    def teams(self) -> List[str]:
        return [t for t in (self.team1, self.team2) if t is not None]

    def other_team(self, name: str) -> Optional[str]:
        if name == self.team1:
            return self.team2
        if name == self.team2:
            return self.team1
        return None

    def to_dict(self):
        return {
            'team1': self.team1,
            'team2': self.team2,
            'winner': self.winner,
            'active': self.active,
        }


@dataclass
class FinalMatch(Match):
    score1: int = 0
    score2: int = 0

    def add_point(self, name: str) -> None:
        if name == self.team1:
            self.score1 += 1
        elif name == self.team2:
            self.score2 += 1

    def leader_at(self, target: int) -> Optional[str]:
        """Team whose score reached ``target``, if any."""
        if self.score1 >= target:
            return self.team1
        if self.score2 >= target:
            return self.team2
        return None

    def to_dict(self):
        data = super().to_dict()
        data['score1'] = self.score1
        data['score2'] = self.score2
        return data


@dataclass(frozen=True)
class MatchRef:
    round: Round
    index: int = 0

    def to_dict(self):
        return {'round': self.round.value, 'index': self.index}


@dataclass
class Bracket:
    quarterfinals: List[Match] = field(default_factory=lambda: [Match() for _ in range(4)])
    semifinals: List[Match] = field(default_factory=lambda: [Match() for _ in range(2)])
    final: FinalMatch = field(default_factory=FinalMatch)

    def get(self, ref: MatchRef) -> Optional[Match]:
        if ref.round == Round.FINAL:
            return self.final
        matches = self.quarterfinals if ref.round == Round.QUARTERFINALS else self.semifinals
        if 0 <= ref.index < len(matches):
            return matches[ref.index]
        return None

    def reset(self) -> None:
        self.quarterfinals = [Match() for _ in range(4)]
        self.semifinals = [Match() for _ in range(2)]
        self.final = FinalMatch()

    def to_dict(self):
        return {
            'quarterfinals': [m.to_dict() for m in self.quarterfinals],
            'semifinals': [m.to_dict() for m in self.semifinals],
            'final': self.final.to_dict(),
        }


@dataclass
class Tournament:
    bracket: Bracket = field(default_factory=Bracket)
    started: bool = False
    current_match: Optional[MatchRef] = None
    phase: Phase = Phase.WAITING

    @property
    def champion(self) -> Optional[str]:
        return self.bracket.final.winner

    def get_current_match(self) -> Optional[Match]:
        if self.current_match is None:
            return None
        return self.bracket.get(self.current_match)

    def reset(self) -> None:
        self.bracket.reset()
        self.started = False
        self.current_match = None
        self.phase = Phase.WAITING

    def to_dict(self):
        return {
            'started': self.started,
            'bracket': self.bracket.to_dict(),
            'currentMatch': self.current_match.to_dict() if self.current_match else None,
            'phase': self.phase.value,
            'champion': self.champion,
        }


@dataclass
class RoundState:
    genre: Optional[str] = None
    buzzed_team: Optional[str] = None
    buzz_time_ms: Optional[int] = None
    current_answerer: Optional[str] = None
    can_buzz: List[str] = field(default_factory=list)
    started_at: Optional[float] = None

    def clear(self) -> None:
        self.genre = None
        self.buzzed_team = None
        self.buzz_time_ms = None
        self.current_answerer = None
        self.can_buzz = []
        self.started_at = None

    def to_dict(self, phase: Phase):
        # Timers and the eligible set stay server-side
        return {
            'genre': self.genre,
            'buzzedTeam': self.buzzed_team,
            'currentAnswerer': self.current_answerer,
            'phase': phase.value,
        }
