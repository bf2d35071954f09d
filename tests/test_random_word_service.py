import random

import pytest

from repositories.vocabulary_repo import VocabularyRepository
from services.dictionary_service import DictionaryService
from services.learned_word_service import LearnedWordService
from services.random_word_service import RandomWordService


def seed_vocabulary(db, words):
    repo = VocabularyRepository(db)
    for word in words:
        repo.create(word=word)


def make_service(db, cache, fake_api, seed=7):
    return RandomWordService(
        db,
        cache,
        dictionary=DictionaryService(db, fake_api.client()),
        rng=random.Random(seed),
    )


def test_only_unlearned_candidate_is_returned(db_session, user, cache, fake_api):
    seed_vocabulary(db_session, ["cat", "dog"])
    LearnedWordService(db_session, cache).mark_word_as_learned(user_id=user.id, word="cat")
    svc = make_service(db_session, cache, fake_api)

    for _ in range(20):
        pick = svc.pick_unlearned(user_id=user.id)
        assert pick.reason == "ok"
        assert pick.vocabulary.word == "dog"


def test_selector_never_repeats_until_exhausted(db_session, user, cache, fake_api):
    words = ["apple", "banana", "cherry", "damson", "elder", "fig", "grape"]
    seed_vocabulary(db_session, words)
    svc = make_service(db_session, cache, fake_api)
    learned_svc = LearnedWordService(db_session, cache)

    seen = []
    while True:
        pick = svc.pick_unlearned(user_id=user.id)
        if not pick.found:
            break
        assert pick.vocabulary.word not in seen
        seen.append(pick.vocabulary.word)
        learned_svc.mark_word_as_learned(user_id=user.id, word=pick.vocabulary.word)

    assert sorted(seen) == sorted(words)
    assert pick.reason == "all_learned"


def test_learned_words_match_case_insensitively(db_session, user, cache, fake_api):
    seed_vocabulary(db_session, ["Paris", "london"])
    LearnedWordService(db_session, cache).mark_word_as_learned(user_id=user.id, word="paris")
    svc = make_service(db_session, cache, fake_api)

    assert svc.pick_unlearned(user_id=user.id).vocabulary.word == "london"


def test_empty_vocabulary_is_not_an_error(db_session, user, cache, fake_api):
    svc = make_service(db_session, cache, fake_api)

    pick = svc.pick_unlearned(user_id=user.id)

    assert pick.vocabulary is None
    assert pick.reason == "empty_vocabulary"


def test_selection_is_uniform_over_remaining(db_session, user, cache, fake_api):
    seed_vocabulary(db_session, ["a", "b", "c"])
    svc = make_service(db_session, cache, fake_api, seed=1)

    picks = {svc.pick_unlearned(user_id=user.id).vocabulary.word for _ in range(60)}

    assert picks == {"a", "b", "c"}


@pytest.mark.asyncio
async def test_details_include_definition(db_session, user, cache, fake_api):
    seed_vocabulary(db_session, ["dog"])
    svc = make_service(db_session, cache, fake_api)

    pick, entry = await svc.get_random_word_details(user_id=user.id)

    assert pick.reason == "ok"
    assert entry.word == "dog"
    assert entry.meanings[0].definitions[0].definition == "A domesticated canine."


@pytest.mark.asyncio
async def test_details_fall_back_to_bare_word(db_session, user, cache, fake_api):
    VocabularyRepository(db_session).create(word="zyzzyva", vietnamese="một loài mọt")
    svc = make_service(db_session, cache, fake_api)

    pick, entry = await svc.get_random_word_details(user_id=user.id)

    assert pick.found
    assert entry.word == "zyzzyva"
    assert entry.vietnamese == "một loài mọt"
    assert entry.meanings == []
