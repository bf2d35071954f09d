from fastapi import Request

from services.dictionary_service import DictionaryApiClient
from services.word_status_service import WordStatusCache


def get_word_status_cache(request: Request) -> WordStatusCache:
    return request.app.state.word_status_cache


def get_dictionary_client(request: Request) -> DictionaryApiClient:
    return request.app.state.dictionary_client
