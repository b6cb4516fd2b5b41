"""Tests pour RefreshContext."""

from concurrent.futures import ThreadPoolExecutor

from src.services.refresh import RefreshContext


class TestRefreshContext:
    """Tests de la memoire de passe."""

    def test_first_visit_only(self):
        context = RefreshContext()

        assert context.try_visit("episode-1") is True
        assert context.try_visit("episode-1") is False
        assert context.is_visited("episode-1")
        assert len(context) == 1

    def test_reset_starts_a_new_pass(self):
        context = RefreshContext()
        context.try_visit("episode-1")

        context.reset()

        assert not context.is_visited("episode-1")
        assert context.try_visit("episode-1") is True

    def test_concurrent_visits_are_granted_once(self):
        context = RefreshContext()

        with ThreadPoolExecutor(max_workers=8) as executor:
            granted = list(executor.map(lambda _: context.try_visit("series-1"), range(50)))

        assert granted.count(True) == 1
