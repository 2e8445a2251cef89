"""Tests for the episode status machine."""

import pytest

from podbrief.db.models import (
    EPISODE_STATUS_TRANSITIONS,
    TERMINAL_STATUSES,
    EpisodeStatus,
    new_id,
)


class TestEpisodeStatus:
    """Tests for EpisodeStatus and its transition table."""

    def test_every_status_has_transitions(self):
        assert set(EPISODE_STATUS_TRANSITIONS) == set(EpisodeStatus)

    @pytest.mark.parametrize(
        "current, target",
        [
            (EpisodeStatus.PENDING, EpisodeStatus.TRANSCRIBING),
            (EpisodeStatus.PENDING, EpisodeStatus.DOWNLOADING),
            (EpisodeStatus.DOWNLOADING, EpisodeStatus.TRANSCRIBING),
            (EpisodeStatus.TRANSCRIBING, EpisodeStatus.SUMMARIZING),
            (EpisodeStatus.SUMMARIZING, EpisodeStatus.COMPLETED),
            (EpisodeStatus.TRANSCRIBING, EpisodeStatus.FAILED),
            (EpisodeStatus.SUMMARIZING, EpisodeStatus.FAILED),
            (EpisodeStatus.COMPLETED, EpisodeStatus.TRANSCRIBING),
            (EpisodeStatus.FAILED, EpisodeStatus.TRANSCRIBING),
        ],
    )
    def test_allowed(self, current, target):
        assert current.can_transition_to(target)

    @pytest.mark.parametrize(
        "current, target",
        [
            (EpisodeStatus.PENDING, EpisodeStatus.COMPLETED),
            (EpisodeStatus.PENDING, EpisodeStatus.SUMMARIZING),
            (EpisodeStatus.TRANSCRIBING, EpisodeStatus.COMPLETED),
            (EpisodeStatus.COMPLETED, EpisodeStatus.FAILED),
            (EpisodeStatus.FAILED, EpisodeStatus.COMPLETED),
            (EpisodeStatus.SUMMARIZING, EpisodeStatus.TRANSCRIBING),
        ],
    )
    def test_forbidden(self, current, target):
        assert not current.can_transition_to(target)

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {EpisodeStatus.COMPLETED, EpisodeStatus.FAILED}
        assert EpisodeStatus.FAILED.is_terminal
        assert not EpisodeStatus.SUMMARIZING.is_terminal

    def test_values_are_lowercase_strings(self):
        assert EpisodeStatus("transcribing") is EpisodeStatus.TRANSCRIBING
        assert EpisodeStatus.PENDING == "pending"


def test_new_id_is_unique_string():
    first, second = new_id(), new_id()
    assert isinstance(first, str)
    assert first != second
