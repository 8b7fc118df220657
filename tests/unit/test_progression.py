"""
Unit tests for picking winners and cascading invalidation.
"""
import pytest

from pickem.errors import InvalidSelection, InvalidSeriesLength, MatchupIndexOutOfRange, RoundNotFound
from pickem.progression import clear_matchup, is_complete, select_winner, set_mvp
from pickem.types import RoundId


FR, SF, CF, FIN = RoundId.FIRST_ROUND, RoundId.CONF_SEMIS, RoundId.CONF_FINALS, RoundId.FINALS


class TestSelectWinner:
    """Forward propagation of a single pick."""

    def test_winners_fill_next_round(self, empty_bracket):
        b = select_winner(empty_bracket, FR, 0, "BOS", series_length=5)
        b = select_winner(b, "first_round", 1, "CLE", series_length=6)

        semi = b.matchup(SF, 0)
        assert (semi.team_a, semi.team_a_seed) == ("BOS", 1)
        assert (semi.team_b, semi.team_b_seed) == ("CLE", 4)
        assert semi.winner is None

    def test_west_goes_to_west_half(self, empty_bracket):
        b = select_winner(empty_bracket, FR, 4, "OKC", series_length=4)
        assert b.matchup(SF, 2).team_a == "OKC"
        assert b.matchup(SF, 0).team_a is None

    def test_input_is_not_mutated(self, empty_bracket):
        before = empty_bracket.to_dict()
        select_winner(empty_bracket, FR, 0, "BOS", series_length=5)
        assert empty_bracket.to_dict() == before

    def test_idempotent(self, empty_bracket):
        once = select_winner(empty_bracket, FR, 2, "IND", series_length=7)
        twice = select_winner(once, FR, 2, "IND", series_length=7)
        assert once == twice

    def test_winner_seed_defaults_from_matchup(self, empty_bracket):
        b = select_winner(empty_bracket, FR, 0, "MIA", series_length=7)
        assert b.matchup(FR, 0).winner_seed == 8

    def test_normalized_winner_is_stored_canonically(self, empty_bracket):
        b = select_winner(empty_bracket, FR, 0, "  bos ", series_length=5)
        assert b.matchup(FR, 0).winner == "BOS"

    def test_resolving_finals_sets_champion(self, fill_bracket, empty_bracket):
        b = fill_bracket(empty_bracket)
        assert b.champion == "BOS"
        assert b.champion_seed == 1


class TestSelectWinnerErrors:
    def test_unknown_round(self, empty_bracket):
        with pytest.raises(RoundNotFound):
            select_winner(empty_bracket, "quarterfinals", 0, "BOS", series_length=5)

    def test_round_checked_before_index_and_winner(self, empty_bracket):
        with pytest.raises(RoundNotFound):
            select_winner(empty_bracket, "nope", 99, "NOBODY", series_length=None)

    def test_index_out_of_range(self, empty_bracket):
        with pytest.raises(MatchupIndexOutOfRange):
            select_winner(empty_bracket, FR, 8, "BOS", series_length=5)

    def test_winner_not_participant(self, empty_bracket):
        with pytest.raises(InvalidSelection):
            select_winner(empty_bracket, FR, 0, "NYK", series_length=5)

    def test_matchup_without_participants(self, empty_bracket):
        with pytest.raises(InvalidSelection):
            select_winner(empty_bracket, SF, 0, "BOS", series_length=5)

    def test_seed_mismatch(self, empty_bracket):
        with pytest.raises(InvalidSelection):
            select_winner(empty_bracket, FR, 0, "BOS", winner_seed=8, series_length=5)

    @pytest.mark.parametrize("length", [None, 3, 8])
    def test_invalid_series_length(self, empty_bracket, length):
        with pytest.raises(InvalidSeriesLength):
            select_winner(empty_bracket, FR, 0, "BOS", series_length=length)


class TestCascadingInvalidation:
    """Changing an early pick clears everything it fed, and nothing else."""

    def test_changed_winner_clears_path_to_finals(self, resolved_bracket):
        b = select_winner(resolved_bracket, FR, 0, "MIA", series_length=7)

        semi = b.matchup(SF, 0)
        assert semi.team_a == "MIA"
        assert semi.team_b == "CLE"
        assert semi.winner is None

        conf_final = b.matchup(CF, 0)
        assert conf_final.team_a is None
        assert conf_final.team_b == "MIL"
        assert conf_final.winner is None

        finals = b.finals
        assert finals.team_a is None
        assert finals.team_b == "OKC"
        assert finals.winner is None
        assert b.champion is None
        assert b.champion_seed is None
        assert b.mvp is None

    def test_other_branches_untouched(self, resolved_bracket):
        b = select_winner(resolved_bracket, FR, 0, "MIA", series_length=7)
        assert b.matchup(SF, 1) == resolved_bracket.matchup(SF, 1)
        assert b.round(SF)[2:] == resolved_bracket.round(SF)[2:]
        assert b.matchup(CF, 1) == resolved_bracket.matchup(CF, 1)
        assert b.round(FR)[1:] == resolved_bracket.round(FR)[1:]

    def test_same_winner_new_length_stops_at_unchanged_slot(self, resolved_bracket):
        b = select_winner(resolved_bracket, FR, 0, "BOS", series_length=7)
        assert b.matchup(FR, 0).series_length == 7
        assert b.matchup(SF, 0) == resolved_bracket.matchup(SF, 0)
        assert b.champion == "BOS"
        assert b.mvp == "Jayson Tatum"

    def test_conference_final_change_resets_mvp(self, resolved_bracket):
        b = select_winner(resolved_bracket, CF, 1, "MIN", series_length=6)
        assert b.finals.team_b == "MIN"
        assert b.finals.winner is None
        assert b.mvp is None


class TestClearMatchup:
    def test_clear_keeps_participants_and_cascades(self, resolved_bracket):
        b = clear_matchup(resolved_bracket, FR, 0)
        first = b.matchup(FR, 0)
        assert first.participants == ("BOS", "MIA")
        assert first.winner is None
        assert first.series_length is None
        assert b.matchup(SF, 0).team_a is None
        assert b.matchup(SF, 0).winner is None
        assert b.champion is None

    def test_clear_unresolved_is_noop(self, empty_bracket):
        assert clear_matchup(empty_bracket, FR, 0) == empty_bracket

    def test_clear_finals_keeps_mvp(self, resolved_bracket):
        b = clear_matchup(resolved_bracket, FIN, 0)
        assert b.champion is None
        assert b.finals.participants == ("BOS", "OKC")
        assert b.mvp == "Jayson Tatum"

    def test_clear_validates_round(self, empty_bracket):
        with pytest.raises(RoundNotFound):
            clear_matchup(empty_bracket, "semis", 0)


class TestMvpAndCompletion:
    def test_set_and_clear_mvp(self, empty_bracket):
        b = set_mvp(empty_bracket, "  Shai Gilgeous-Alexander ")
        assert b.mvp == "Shai Gilgeous-Alexander"
        assert set_mvp(b, "  ").mvp is None

    def test_is_complete(self, empty_bracket, resolved_bracket):
        assert not is_complete(empty_bracket)
        assert is_complete(resolved_bracket)
