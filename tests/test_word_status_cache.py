from repositories.learned_word_repo import LearnedWordRepository
from services.learned_word_service import LearnedWordService
from services.word_status_service import WordStatusCache, WordStatusService


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_cache_entry_expires_after_ttl():
    clock = FakeClock()
    cache = WordStatusCache(ttl_minutes=15, clock=clock)
    cache.set(1, ["Cat"])

    clock.now += 15 * 60 - 1
    assert cache.get(1) == frozenset({"cat"})

    clock.now += 1
    assert cache.get(1) is None
    assert 1 not in cache


def test_membership_is_case_insensitive(db_session, user, cache):
    LearnedWordRepository(db_session).add(user_id=user.id, word="Abandon")
    status = WordStatusService(LearnedWordRepository(db_session), cache)

    assert status.is_word_learned(user.id, "abandon")
    assert status.is_word_learned(user.id, "  ABANDON ")
    assert not status.is_word_learned(user.id, "abbey")


def test_cache_hit_skips_repository(db_session, user, cache, monkeypatch):
    repo = LearnedWordRepository(db_session)
    repo.add(user_id=user.id, word="cat")
    status = WordStatusService(repo, cache)
    assert status.is_word_learned(user.id, "cat")

    def boom(user_id):
        raise AssertionError("repository should not be queried on a cache hit")

    monkeypatch.setattr(repo, "get_learned_word_set", boom)
    assert status.is_word_learned(user.id, "cat")
    assert not status.is_word_learned(user.id, "dog")


def test_repository_error_fails_open(db_session, user, cache, monkeypatch):
    repo = LearnedWordRepository(db_session)

    def broken(user_id):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(repo, "get_learned_word_set", broken)
    status = WordStatusService(repo, cache)

    assert status.is_word_learned(user.id, "cat") is False
    assert user.id not in cache


def test_marking_invalidates_within_ttl(db_session, user, cache):
    svc = LearnedWordService(db_session, cache)
    assert svc.is_word_learned(user_id=user.id, word="cat") is False
    assert user.id in cache

    result = svc.mark_word_as_learned(user_id=user.id, word="cat")

    assert result.success
    assert user.id not in cache
    assert svc.is_word_learned(user_id=user.id, word="cat") is True


def test_removing_invalidates_within_ttl(db_session, user, cache):
    svc = LearnedWordService(db_session, cache)
    learned = svc.mark_word_as_learned(user_id=user.id, word="cat").data
    assert svc.is_word_learned(user_id=user.id, word="cat") is True

    assert svc.remove_learned_word(user_id=user.id, word_id=learned.id)
    assert svc.is_word_learned(user_id=user.id, word="cat") is False


def test_invalidation_is_per_user(make_user, cache):
    cache.set(1, ["cat"])
    cache.set(2, ["dog"])

    cache.invalidate(1)

    assert cache.get(1) is None
    assert cache.get(2) == frozenset({"dog"})
