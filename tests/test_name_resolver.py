import pytest

from data_models import ResumeRecord, ResumeStatus
from name_resolver import deduplicate_names, resolve_name, resolve_names
from tests.helpers import FakeGeminiClient, text_upload


def test_deduplicate_repeated_names():
    assert deduplicate_names(["Ann", "Ann", "Ann"]) == ["Ann", "Ann (1)", "Ann (2)"]


def test_deduplicate_skips_taken_suffix():
    assert deduplicate_names(["Ann (1)", "Ann", "Ann"]) == ["Ann (1)", "Ann", "Ann (2)"]


def test_deduplicate_keeps_unique_names():
    assert deduplicate_names(["Ann", "Bob"]) == ["Ann", "Bob"]


@pytest.mark.anyio
async def test_resolve_name_falls_back_to_filename(fake_client):
    assert await resolve_name(fake_client, "no name here", "cv.pdf") == "cv.pdf"


@pytest.mark.anyio
async def test_resolve_name_uses_model_answer():
    client = FakeGeminiClient(names={"text": "Jane Doe"})
    assert await resolve_name(client, "text", "cv.pdf") == "Jane Doe"


def _ready(name, text, display_name=None):
    record = ResumeRecord.create(text_upload(name, text), display_name)
    return record.advance(ResumeStatus.PARSING).advance(ResumeStatus.READY, text=text)


@pytest.mark.anyio
async def test_resolve_names_dedupes_and_respects_locked_names():
    client = FakeGeminiClient(names={"a": "Ann", "b": "Ann", "c": "Ann"})
    records = [
        _ready("a.txt", "a"),
        _ready("partner.pdf", "p", display_name="Ann"),
        _ready("b.txt", "b"),
        _ready("c.txt", "c"),
        _ready("d.txt", "d"),
    ]
    resolved = await resolve_names(client, records, batch_size=2)

    assert [r.display_name for r in resolved] == ["Ann", "Ann (1)", "Ann (2)", "Ann (3)", "d.txt"]
    # the partner-supplied name is never sent to the model
    assert sorted(client.name_calls) == ["a", "b", "c", "d"]
    assert all(r.status is ResumeStatus.READY for r in resolved)
