import httpx
import pytest
from sqlalchemy import func, select

from models.vocabulary import Vocabulary
from repositories.vocabulary_repo import VocabularyRepository
from services.dictionary_service import DictionaryService


def rows_for(db, word):
    stmt = select(func.count(Vocabulary.id)).where(func.lower(Vocabulary.word) == word.lower())
    return db.execute(stmt).scalar_one()


@pytest.mark.asyncio
async def test_lookup_is_idempotent(db_session, fake_api):
    svc = DictionaryService(db_session, fake_api.client())

    first = await svc.lookup("abandon")
    second = await svc.lookup("abandon")

    assert first is not None and second is not None
    assert first.model_dump(exclude={"vietnamese"}) == second.model_dump(exclude={"vietnamese"})
    assert first.phonetic == "/əˈbændən/"
    assert second.meanings[0].part_of_speech == "verb"
    assert fake_api.calls == ["abandon"]
    assert rows_for(db_session, "abandon") == 1


@pytest.mark.asyncio
async def test_lookup_updates_existing_vocabulary_row(db_session, fake_api):
    VocabularyRepository(db_session).create(word="cat", vietnamese="con mèo")
    svc = DictionaryService(db_session, fake_api.client())

    entry = await svc.lookup("cat")

    assert entry.vietnamese == "con mèo"
    assert entry.phonetic == "/kæt/"
    assert rows_for(db_session, "cat") == 1
    stored = VocabularyRepository(db_session).get_by_word("cat")
    assert stored.has_definition
    assert stored.updated_at is not None


@pytest.mark.asyncio
async def test_unknown_word_is_not_cached(db_session, fake_api):
    svc = DictionaryService(db_session, fake_api.client())

    assert await svc.lookup("qwertyuiop") is None
    assert await svc.lookup("qwertyuiop") is None

    assert fake_api.calls == ["qwertyuiop", "qwertyuiop"]
    assert rows_for(db_session, "qwertyuiop") == 0


@pytest.mark.asyncio
async def test_network_errors_become_not_found(db_session, fake_api):
    fake_api.fail_with = httpx.ReadTimeout("too slow")
    svc = DictionaryService(db_session, fake_api.client())

    assert await svc.lookup("abandon") is None
    assert rows_for(db_session, "abandon") == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [b"", b"not json", b"[]", b"{\"title\": \"odd\"}"])
async def test_unusable_bodies_become_not_found(db_session, fake_api, body):
    fake_api.handler = lambda request: httpx.Response(200, content=body)
    svc = DictionaryService(db_session, fake_api.client())

    assert await svc.lookup("abandon") is None


@pytest.mark.asyncio
async def test_empty_word_skips_api(db_session, fake_api):
    svc = DictionaryService(db_session, fake_api.client())

    assert await svc.lookup("   ") is None
    assert fake_api.calls == []


@pytest.mark.asyncio
async def test_cache_all_fills_missing_definitions(db_session, fake_api):
    repo = VocabularyRepository(db_session)
    for word in ["cat", "dog", "unknownword"]:
        repo.create(word=word)
    svc = DictionaryService(db_session, fake_api.client())

    cached = await svc.cache_all_definitions(delay=0)

    assert cached == 2
    assert sorted(fake_api.calls) == ["cat", "dog", "unknownword"]
    assert [v.word for v in repo.list_missing_definitions()] == ["unknownword"]

    fake_api.calls.clear()
    await svc.lookup("dog")
    assert fake_api.calls == []
