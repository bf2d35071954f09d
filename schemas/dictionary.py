from pydantic import BaseModel, ConfigDict, Field


class Phonetic(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str | None = None
    audio: str | None = None


class Definition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    definition: str | None = None
    example: str | None = None
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)


class Meaning(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    part_of_speech: str | None = Field(default=None, alias="partOfSpeech")
    definitions: list[Definition] = Field(default_factory=list)


class DictionaryEntry(BaseModel):
    """One word as served by the dictionary API and stored in the local cache."""

    model_config = ConfigDict(populate_by_name=True)

    word: str
    phonetic: str | None = None
    phonetics: list[Phonetic] = Field(default_factory=list)
    meanings: list[Meaning] = Field(default_factory=list)
    vietnamese: str | None = None


class CacheAllOut(BaseModel):
    cached: int
    message: str
