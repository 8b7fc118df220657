# tests/conftest.py
import pytest

from pickem.models import Bracket
from pickem.progression import select_winner, set_mvp
from pickem.template import new_bracket
from pickem.types import ROUND_ORDER


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


def resolve_all(bracket: Bracket, series_length: int = 5) -> Bracket:
    """Resolve every series in favour of team_a, round by round."""
    for rid in ROUND_ORDER:
        for i in range(len(bracket.round(rid))):
            m = bracket.matchup(rid, i)
            bracket = select_winner(bracket, rid, i, m.team_a, series_length=series_length)
    return bracket


@pytest.fixture
def seeds():
    """Seeded field by conference (seed -> team)."""
    return {
        "east": {1: "BOS", 2: "NYK", 3: "MIL", 4: "CLE", 5: "ORL", 6: "IND", 7: "PHI", 8: "MIA", 9: "CHI", 10: "ATL"},
        "west": {1: "OKC", 2: "DEN", 3: "MIN", 4: "LAC", 5: "DAL", 6: "PHX", 7: "LAL", 8: "NOP", 9: "SAC", 10: "GSW"},
    }


@pytest.fixture
def postseason_field(seeds):
    """Same teams in the standings field shape."""
    field = {}
    for conf, table in seeds.items():
        field[conf] = {
            "auto_bids": [{"team_id": team, "seed": seed} for seed, team in table.items() if seed <= 6],
            "play_in": [{"team_id": team, "seed": seed} for seed, team in table.items() if 7 <= seed <= 10],
            "eliminated": [],
        }
    return field


@pytest.fixture
def empty_bracket(seeds):
    """Sixteen teams placed, no Play-In, nothing picked."""
    return new_bracket(seeds, play_in=False)


@pytest.fixture
def play_in_bracket(seeds):
    """Seeds 1-6 placed, Play-In games populated, nothing picked."""
    return new_bracket(seeds, play_in=True)


@pytest.fixture
def resolved_bracket(empty_bracket):
    """Every series won by team_a in five; BOS champion, MVP picked."""
    return set_mvp(resolve_all(empty_bracket), "Jayson Tatum")


@pytest.fixture
def fill_bracket():
    return resolve_all
