"""
Unit tests for scoring a prediction against official results.
"""
import pytest

from pickem.config import DEFAULT_SCORING_POLICY, ScoringPolicy
from pickem.errors import InvalidBracket
from pickem.models import Matchup
from pickem.play_in import resolve_play_in
from pickem.progression import select_winner, set_mvp
from pickem.scoring import RoundScore, is_upset, score, score_matchup
from pickem.types import RoundId


FR, SF, CF, FIN = RoundId.FIRST_ROUND, RoundId.CONF_SEMIS, RoundId.CONF_FINALS, RoundId.FINALS


class TestSeriesScoring:
    """Base points and series-length bonus."""

    @pytest.fixture
    def official(self, empty_bracket):
        # CLE (4) beats ORL (5) in five.
        return select_winner(empty_bracket, FR, 1, "CLE", series_length=5)

    def test_exact_length(self, empty_bracket, official):
        predicted = select_winner(empty_bracket, FR, 1, "CLE", series_length=5)
        result = score(predicted, official)
        assert result.total == 1.5
        assert result.base_points == 1.0
        assert result.series_length_points == 0.5
        assert result.correct_picks == 1
        assert result.correct_series == 1

    def test_wrong_length(self, empty_bracket, official):
        predicted = select_winner(empty_bracket, FR, 1, "CLE", series_length=6)
        result = score(predicted, official)
        assert result.total == 1.0
        assert result.correct_series == 0

    def test_wrong_winner(self, empty_bracket, official):
        predicted = select_winner(empty_bracket, FR, 1, "ORL", series_length=5)
        result = score(predicted, official)
        assert result.total == 0
        assert result.rounds["first_round"].possible_points == 1.0

    def test_series_bonus_disabled(self, empty_bracket, official):
        predicted = select_winner(empty_bracket, FR, 1, "CLE", series_length=5)
        policy = ScoringPolicy(series_length_bonus_enabled=False)
        result = score(predicted, official, policy)
        assert result.total == 1.0
        assert result.rounds["first_round"].bonus_count == 0
        assert result.correct_series == 0

    def test_counts_follow_disabled_bonuses(self, resolved_bracket):
        policy = ScoringPolicy(series_length_bonus_enabled=False, upset_bonus_enabled=False)
        result = score(resolved_bracket, resolved_bracket, policy)
        assert result.correct_series == 0
        assert result.upsets_called == 0
        assert all(rs.bonus_count == 0 and rs.upset_count == 0 for rs in result.rounds.values())

    def test_records_are_accepted(self, empty_bracket, official):
        predicted = select_winner(empty_bracket, FR, 1, "CLE", series_length=5)
        assert score(predicted.to_dict(), official.to_dict()).total == 1.5


class TestUpsets:
    @pytest.fixture
    def official(self, empty_bracket):
        # MIA (8) over BOS (1) in six.
        return select_winner(empty_bracket, FR, 0, "MIA", series_length=6)

    def test_upset_called(self, empty_bracket, official):
        predicted = select_winner(empty_bracket, FR, 0, "MIA", series_length=7)
        result = score(predicted, official)
        assert result.total == 3.0
        assert result.upset_points == 2.0
        assert result.upsets_called == 1
        assert result.series_length_points == 0

    def test_upset_with_exact_length(self, empty_bracket, official):
        predicted = select_winner(empty_bracket, FR, 0, "MIA", series_length=6)
        assert score(predicted, official).total == 3.5

    def test_upset_bonus_disabled(self, empty_bracket, official):
        predicted = select_winner(empty_bracket, FR, 0, "MIA", series_length=7)
        result = score(predicted, official, ScoringPolicy(upset_bonus_enabled=False))
        assert result.total == 1.0
        assert result.upsets_called == 0

    def test_favourite_win_is_not_upset(self, empty_bracket):
        official = select_winner(empty_bracket, FR, 0, "BOS", series_length=4)
        assert not is_upset(official.matchup(FR, 0))

    def test_equal_seeds_are_not_upset(self, resolved_bracket):
        # Finals: BOS (1) v OKC (1)
        assert not is_upset(resolved_bracket.finals)

    def test_missing_seed_is_not_upset(self):
        assert is_upset(Matchup(team_a="A", team_b="B", team_b_seed=1, winner="A", series_length=4)) is False


class TestPerfectBracket:
    def test_totals(self, resolved_bracket):
        result = score(resolved_bracket, resolved_bracket)
        # base 8*1 + 4*2 + 2*3 + 4 = 26, series 8*.5 + 4*1 + 2*1.5 + 2 = 13,
        # MIL (3) over NYK (2) and MIN (3) over DEN (2) are upsets, MVP 2.5
        assert result.base_points == 26.0
        assert result.series_length_points == 13.0
        assert result.upset_points == 4.0
        assert result.mvp_points == 2.5
        assert result.total == 45.5
        assert result.correct_picks == 15
        assert result.correct_series == 15
        assert result.upsets_called == 2
        assert result.max_possible == 0
        assert result.possible_points == 45.5

    def test_round_breakdown(self, resolved_bracket):
        rounds = score(resolved_bracket, resolved_bracket).rounds
        assert set(rounds) == {"first_round", "conf_semis", "conf_finals", "finals", "finals_mvp"}
        semis = rounds["conf_semis"]
        assert semis.correct_picks == 4
        assert semis.upset_count == 2
        assert semis.subtotal == 8.0 + 4.0 + 4.0

    def test_champion_bonus(self, resolved_bracket):
        result = score(resolved_bracket, resolved_bracket, ScoringPolicy(champion_bonus=5))
        assert result.champion_points == 5.0
        assert result.total == 50.5


class TestPartialPaths:
    def test_series_bonus_needs_same_participants(self, resolved_bracket):
        predicted = select_winner(resolved_bracket, FR, 1, "ORL", series_length=5)
        predicted = select_winner(predicted, SF, 0, "BOS", series_length=5)

        semis = score(predicted, resolved_bracket).rounds["conf_semis"]
        assert semis.correct_picks == 4
        # predicted BOS v ORL, official BOS v CLE: winner credit only
        assert semis.bonus_count == 3

    def test_record_missing_a_round(self, resolved_bracket):
        """An omitted round scores as unpicked; later rounds still count."""
        record = resolved_bracket.to_dict()
        del record["rounds"]["conf_semis"]
        result = score(record, resolved_bracket)
        assert result.rounds["conf_semis"].correct_picks == 0
        assert result.rounds["conf_finals"].correct_picks == 2
        # conf_semis was worth 4*2 base + 4*1 series + 2 upsets
        assert result.total == 45.5 - 16.0
        assert result.max_possible == 0

    def test_mvp_normalized(self, resolved_bracket):
        predicted = set_mvp(resolved_bracket, "  jayson tatum")
        assert score(predicted, resolved_bracket).mvp_points == 2.5

    def test_wrong_mvp(self, resolved_bracket):
        predicted = set_mvp(resolved_bracket, "Jaylen Brown")
        result = score(predicted, resolved_bracket)
        assert result.mvp_points == 0
        assert result.rounds["finals_mvp"].correct_picks == 0


class TestMaxPossible:
    def test_undecided_games_with_picks(self, empty_bracket, resolved_bracket):
        result = score(resolved_bracket, empty_bracket)
        # Only the first round has participants in the official bracket.
        expected = (
            8 * (1 + 0.5)
            + 4 * 2 + 2 * 3 + 4
            + DEFAULT_SCORING_POLICY.mvp_points
        )
        assert result.total == 0
        assert result.max_possible == expected
        assert result.possible_points == expected

    def test_no_pick_no_remaining(self, empty_bracket):
        assert score(empty_bracket, empty_bracket).max_possible == 0


class TestPlayInScoring:
    @pytest.fixture
    def official(self, play_in_bracket):
        return resolve_play_in(play_in_bracket, "east", "seventh_eighth", "PHI")

    def test_correct_game(self, play_in_bracket, official):
        predicted = resolve_play_in(play_in_bracket, "east", "seventh_eighth", "PHI")
        predicted = resolve_play_in(predicted, "east", "ninth_tenth", "CHI")
        result = score(predicted, official)
        assert result.play_in_points == 1.0
        assert result.correct_picks == 1
        assert result.rounds["play_in"].correct_picks == 1
        assert result.max_possible == 1.0

    def test_disabled(self, play_in_bracket, official):
        predicted = resolve_play_in(play_in_bracket, "east", "seventh_eighth", "PHI")
        result = score(predicted, official, ScoringPolicy(play_in_enabled=False))
        assert result.play_in_points == 0
        assert "play_in" not in result.rounds

    def test_ignored_when_official_has_no_play_in(self, play_in_bracket, empty_bracket):
        predicted = resolve_play_in(play_in_bracket, "east", "seventh_eighth", "PHI")
        assert score(predicted, empty_bracket).play_in_points == 0


class TestOutputShape:
    def test_to_dict(self, resolved_bracket):
        d = score(resolved_bracket, resolved_bracket).to_dict()
        assert d["total"] == 45.5
        assert d["rounds"]["finals"]["subtotal"] == 6.0
        assert set(d["rounds"]["first_round"]) == {
            "correct_picks",
            "bonus_count",
            "upset_count",
            "base_points",
            "series_length_points",
            "upset_points",
            "subtotal",
            "possible_points",
        }

    def test_round_score_subtotal(self):
        assert RoundScore(base_points=2, series_length_points=1, upset_points=2).subtotal == 5


class TestScoringPolicy:
    def test_overrides_and_unknown_keys(self):
        policy = ScoringPolicy.from_dict({"base_points": {"finals": 10}, "mvp_points": "5", "league_name": "x"})
        assert policy.base_for(FIN) == 10.0
        assert policy.base_for(FR) == 1.0
        assert policy.mvp_points == 5.0

    def test_round_trip(self):
        policy = ScoringPolicy(upset_bonus=3, champion_bonus=1, play_in_enabled=False)
        assert ScoringPolicy.from_dict(policy.to_dict()) == policy

    def test_unknown_round(self):
        with pytest.raises(InvalidBracket):
            ScoringPolicy.from_dict({"series_bonus": {"round_of_64": 1}})

    def test_not_a_number(self):
        with pytest.raises(InvalidBracket):
            ScoringPolicy.from_dict({"upset_bonus": "lots"})


class TestScoreMatchup:
    def test_single_series(self, empty_bracket):
        official = select_winner(empty_bracket, FR, 0, "MIA", series_length=6)
        predicted = select_winner(empty_bracket, FR, 0, "MIA", series_length=6)
        result = score_matchup(predicted.matchup(FR, 0), official.matchup(FR, 0), FR)
        assert result.correct and result.exact_series and result.upset
        assert result.points == 3.5

    def test_undecided_reports_remaining(self, empty_bracket, resolved_bracket):
        result = score_matchup(resolved_bracket.finals, empty_bracket.finals, FIN, ScoringPolicy(champion_bonus=3))
        assert not result.decided
        assert result.points == 0
        assert result.remaining == 4 + 3

    def test_flag_strings(self):
        policy = ScoringPolicy.from_dict({"upset_bonus_enabled": "false", "series_length_bonus_enabled": " FALSE "})
        assert policy.upset_bonus_enabled is False
        assert policy.series_length_bonus_enabled is False
        assert ScoringPolicy.from_dict({"play_in_enabled": "True"}).play_in_enabled is True

    @pytest.mark.parametrize("value", ["nope", "0", 1, 0, []])
    def test_flag_rejects_non_boolean(self, value):
        with pytest.raises(InvalidBracket) as exc_info:
            ScoringPolicy.from_dict({"upset_bonus_enabled": value})
        assert exc_info.value.details == [f"upset_bonus_enabled: not a boolean ({value!r})"]
