"""Tests for ranking, role deltas and pagination."""

import pytest

from dpsbot.data_models.leaderboard import RankedEntry
from dpsbot.utils.magnitude import MagnitudeValue
from dpsbot.utils.ranking import paginate, rank, role_delta


def value(mantissa, unit="K"):
    return MagnitudeValue.create(mantissa, unit)


def ranked_users(*user_ids):
    """Ranked list with the given users in order, values descending."""
    return [
        RankedEntry(position=i, user_id=user_id, value=value(1000 - i))
        for i, user_id in enumerate(user_ids, start=1)
    ]


class TestRank:
    def test_orders_by_absolute_magnitude(self):
        result = rank([(1, value(100, "K")), (2, value(1, "M"))])
        assert [entry.user_id for entry in result] == [2, 1]
        assert [entry.position for entry in result] == [1, 2]

    def test_ties_break_by_user_id(self):
        result = rank([(30, value(1, "M")), (10, value(1000, "K")), (20, value(1, "M"))])
        assert [entry.user_id for entry in result] == [10, 20, 30]
        assert [entry.position for entry in result] == [1, 2, 3]

    def test_input_order_does_not_matter(self):
        records = [(1, value(5, "B")), (2, value(5, "Qa")), (3, value(7, "T")), (4, value(0))]
        assert rank(records) == rank(list(reversed(records)))

    def test_keeps_values(self):
        v = value(12345, "Qi")
        assert rank([(7, v)]) == [RankedEntry(position=1, user_id=7, value=v)]

    def test_empty(self):
        assert rank([]) == []


class TestRoleDelta:
    def test_position_changes_hands(self):
        delta = role_delta(ranked_users(2, 1), {1: "R1"}, {1: {"R1"}})
        assert delta.to_grant == [(2, "R1")]
        assert delta.to_revoke == [(1, "R1")]

    def test_no_change_when_already_correct(self):
        delta = role_delta(ranked_users(1, 2), {1: "R1", 2: "R2"}, {1: {"R1"}, 2: {"R2"}})
        assert delta.is_empty

    def test_only_configured_positions_are_considered(self):
        ranked = ranked_users(1, 2, 3, 4)
        delta = role_delta(ranked, {1: "R1", 3: "R3"}, {})
        assert delta.to_grant == [(1, "R1"), (3, "R3")]
        assert delta.to_revoke == []

    def test_unfilled_position_only_revokes(self):
        delta = role_delta(ranked_users(1, 2, 3), {1: "R1", 10: "R10"}, {9: {"R10"}})
        assert delta.to_grant == [(1, "R1")]
        assert delta.to_revoke == [(9, "R10")]

    def test_unranked_holder_loses_role(self):
        delta = role_delta(ranked_users(1), {1: "R1"}, {1: {"R1"}, 50: {"R1", "other"}})
        assert delta.to_grant == []
        assert delta.to_revoke == [(50, "R1")]

    def test_unrelated_roles_are_left_alone(self):
        delta = role_delta(ranked_users(1, 2), {1: "R1"}, {2: {"Moderator"}})
        assert delta.to_grant == [(1, "R1")]
        assert delta.to_revoke == []

    def test_member_swapping_positions(self):
        delta = role_delta(ranked_users(2, 1), {1: "R1", 2: "R2"}, {1: {"R1"}, 2: {"R2"}})
        assert delta.to_grant == [(2, "R1"), (1, "R2")]
        assert delta.to_revoke == [(1, "R1"), (2, "R2")]

    def test_role_shared_by_several_positions(self):
        role_map = {1: "Top3", 2: "Top3", 3: "Top3"}
        delta = role_delta(ranked_users(1, 2, 3, 4), role_map, {3: {"Top3"}, 4: {"Top3"}})
        assert delta.to_grant == [(1, "Top3"), (2, "Top3")]
        assert delta.to_revoke == [(4, "Top3")]

    def test_empty_ranking_revokes_everything(self):
        delta = role_delta([], {1: "R1"}, {5: {"R1"}})
        assert delta.to_grant == []
        assert delta.to_revoke == [(5, "R1")]

    def test_empty_role_map(self):
        assert role_delta(ranked_users(1), {}, {1: {"R1"}}).is_empty


class TestPaginate:
    def test_middle_page(self):
        page = paginate(ranked_users(*range(1, 26)), 2, 10)
        assert [entry.position for entry in page.entries] == list(range(11, 21))
        assert page.current_page == 2
        assert page.total_pages == 3
        assert page.total_players == 25

    def test_last_partial_page(self):
        page = paginate(ranked_users(*range(1, 26)), 3, 10)
        assert len(page.entries) == 5

    def test_empty_ranking_has_one_page(self):
        page = paginate([], 1, 10)
        assert page.entries == []
        assert page.total_pages == 1

    def test_page_past_the_end_is_empty(self):
        assert paginate(ranked_users(1, 2), 5, 10).entries == []

    @pytest.mark.parametrize("page,page_size", [(0, 10), (-1, 10), (1, 0), (1, 51)])
    def test_rejects_bad_arguments(self, page, page_size):
        with pytest.raises(ValueError):
            paginate(ranked_users(1), page, page_size)
