"""
Event router and batch tests - classification, skips, failure isolation, batch verdict.
"""

import asyncio

import pytest

from content_search.core.errors import BatchProcessingError, MalformedEventError
from content_search.indexing.handler import process_batch, run_batch
from content_search.indexing.router import EventRouter, ItemOutcome
from content_search.indexing.tracker import BatchCompletionTracker

VIDEO_IMAGE = {"site": {"S": "acme"}, "id": {"S": "v1"}, "objectKey": {"S": "video"}}


@pytest.mark.asyncio
async def test_insert_video_scenario(registry, content_api, fake_es, make_record, video_record):
    content_api.add("/content/videos", "v1", {"records": [video_record]})

    report = await process_batch([make_record("CONTENT.CONTENT_METADATA", new_image=VIDEO_IMAGE)], registry)

    assert (report.succeeded, report.failed, report.total) == (1, 0, 1)
    doc = fake_es.docs["acme"]["v1"]
    assert doc["type"] == "video"
    assert doc["videoTitle"] == "X"
    assert doc["videoPrimaryCategory"] == "Action"
    assert doc["videoCategories"] == [{"name": "C1"}]
    assert doc["videoTags"] is None
    assert (doc["status"], doc["isTrailer"], doc["free"], doc["year"]) == ("PUBLISHED", False, True, 2020)


@pytest.mark.asyncio
async def test_remove_video_scenario(registry, content_api, fake_es, make_record):
    record = make_record("CONTENT.CONTENT_METADATA", "REMOVE", old_image=VIDEO_IMAGE)

    report = await process_batch([record], registry)

    assert report.ok
    assert [call for call in fake_es.calls if call[0] in ("index", "delete")] == [("delete", "acme", "v1")]
    assert content_api.requests == []


@pytest.mark.asyncio
async def test_upsert_is_idempotent(registry, content_api, fake_es, make_record, video_record):
    content_api.add("/content/videos", "v1", {"records": [video_record]})
    record = make_record("CONTENT.CONTENT_METADATA", "MODIFY", new_image=VIDEO_IMAGE)

    await process_batch([record], registry)
    once = fake_es.docs["acme"]["v1"]
    await process_batch([record], registry)

    assert fake_es.docs["acme"] == {"v1": once}


@pytest.mark.asyncio
async def test_unsupported_table_is_skipped(registry, fake_es, make_record):
    report = await process_batch([make_record("CONTENT.PLAYLIST", new_image=VIDEO_IMAGE)], registry)

    assert report.ok
    assert (report.total, report.skipped) == (0, 1)
    assert fake_es.calls == []


@pytest.mark.parametrize(
    "table, image",
    [
        ("CONTENT.CONTENT_METADATA", {"objectKey": {"S": "image"}}),
        ("CONTENT.CONTENT_METADATA", {"title": {"S": "no discriminator"}}),
        ("CONTENT.SERIES", {"objectType": {"S": "BUNDLE"}}),
        ("CONTENT.EVENT", {"contentType": {"S": "LIVE"}}),
        ("CONTENT.AUDIO", {"contentType": {"S": "PLAYLIST"}}),
        ("CONTENT.PHOTOGALLERY", {"contentType": {"S": "VIDEO"}}),
    ],
)
@pytest.mark.asyncio
async def test_unsupported_subtype_is_skipped(registry, fake_es, make_record, table, image):
    report = await process_batch([make_record(table, new_image=image)], registry)
    assert (report.succeeded, report.failed, report.skipped) == (0, 0, 1)
    assert fake_es.calls == []


@pytest.mark.asyncio
async def test_series_indexed_from_image(registry, content_api, fake_es, make_record):
    image = {
        "gist": {"M": {"title": {"S": "Lost"}, "primaryCategory": {"M": {}}}},
        "showDetails": {"M": {"status": {"S": "ACTIVE"}}},
    }
    report = await process_batch([make_record("CONTENT.SERIES", content_id="s1", new_image=image)], registry)

    assert report.ok
    assert fake_es.docs["acme"]["s1"]["seriesTitle"] == "Lost"
    assert fake_es.docs["acme"]["s1"]["seriesPrimaryCategory"] is None
    assert content_api.requests == []


@pytest.mark.parametrize(
    "table, discriminator, path",
    [
        ("CONTENT.ARTICLE", {}, "/content/article"),
        ("CONTENT.EVENT", {"contentType": {"S": "EVENT"}}, "/content/event"),
        ("CONTENT.AUDIO", {"contentType": {"S": "AUDIO"}}, "/content/audio"),
        ("CONTENT.PHOTOGALLERY", {"contentType": {"S": "IMAGE"}}, "/content/photo"),
    ],
)
@pytest.mark.asyncio
async def test_api_backed_tables(registry, content_api, fake_es, make_record, table, discriminator, path):
    content_api.add(path, "c1", {"gist": {"title": "T"}})
    report = await process_batch([make_record(table, content_id="c1", new_image=discriminator)], registry)

    assert report.ok
    assert fake_es.docs["acme"]["c1"]["data"] == {"gist": {"title": "T"}}
    assert path in content_api.paths()


@pytest.mark.asyncio
async def test_malformed_event_fails_batch(registry, make_record):
    report = await process_batch([make_record("CONTENT.ARTICLE", "INSERT")], registry)
    assert (report.succeeded, report.failed) == (0, 1)
    assert not report.ok


@pytest.mark.asyncio
async def test_mixed_batch_scenario(registry, content_api, fake_es, make_record, video_record):
    content_api.add("/content/videos", "v1", {"records": [video_record]})
    records = [
        make_record("CONTENT.UNKNOWN", new_image=VIDEO_IMAGE),
        make_record("CONTENT.CONTENT_METADATA", new_image=VIDEO_IMAGE),
        make_record("CONTENT.ARTICLE", content_id="missing", new_image={}),
    ]

    report = await process_batch(records, registry)

    assert (report.total, report.succeeded, report.failed, report.skipped) == (2, 1, 1, 1)
    assert report.message == "There was an error processing 1 events!"
    assert "v1" in fake_es.docs["acme"]


@pytest.mark.asyncio
async def test_failed_fetch_does_not_cancel_siblings(registry, content_api, fake_es, make_record):
    content_api.add("/content/article", "a1", {"gist": {"title": "A"}})
    fake_es.docs["acme"] = {"gone": {"type": "article"}}
    records = [
        make_record("CONTENT.ARTICLE", content_id="a1", new_image={}),
        make_record("CONTENT.ARTICLE", content_id="a2", new_image={}),
        make_record("CONTENT.ARTICLE", "REMOVE", content_id="gone", old_image={}),
    ]

    report = await process_batch(records, registry)

    assert (report.succeeded, report.failed) == (2, 1)
    assert "a1" in fake_es.docs["acme"]
    assert "gone" not in fake_es.docs["acme"]


@pytest.mark.asyncio
async def test_undecodable_discriminator_is_item_failure(
    registry, content_api, fake_es, make_record, video_record
):
    content_api.add("/content/videos", "v1", {"records": [video_record]})
    records = [
        make_record("CONTENT.CONTENT_METADATA", new_image=VIDEO_IMAGE),
        make_record("CONTENT.EVENT", content_id="e1", new_image={"contentType": {"M": "oops"}}),
    ]

    report = await process_batch(records, registry)

    assert (report.succeeded, report.failed, report.skipped) == (1, 1, 0)
    assert "v1" in fake_es.docs["acme"]


def test_route_skips_without_scheduling(registry, make_record):
    router = EventRouter(registry)
    assert router.route(make_record("CONTENT.NOPE", new_image={})) is None


@pytest.mark.asyncio
async def test_tracker_counts_escaped_exceptions():
    async def ok():
        return ItemOutcome(site="acme", content_id="1")

    async def failed():
        return ItemOutcome(site="acme", content_id="2", error=MalformedEventError("bad"))

    async def boom():
        raise RuntimeError("escaped")

    report = await BatchCompletionTracker().settle([ok(), failed(), boom(), ok()], skipped=3)

    assert (report.succeeded, report.failed, report.skipped, report.total) == (2, 2, 3, 4)


@pytest.mark.asyncio
async def test_tracker_order_does_not_matter():
    async def outcome(delay: float, error: Exception | None):
        await asyncio.sleep(delay)
        return ItemOutcome(site="acme", content_id=str(delay), error=error)

    report = await BatchCompletionTracker().settle(
        [outcome(0.02, None), outcome(0.0, RuntimeError("x")), outcome(0.01, None)]
    )
    assert (report.succeeded, report.failed) == (2, 1)


@pytest.mark.asyncio
async def test_run_batch_raises_on_failure(monkeypatch, fake_es, settings, content_api, make_record):
    import httpx

    from content_search.indexing import handler as batch_handler

    real_client = httpx.AsyncClient
    monkeypatch.setattr(batch_handler, "create_elasticsearch", lambda settings: fake_es)
    monkeypatch.setattr(
        batch_handler.httpx,
        "AsyncClient",
        lambda **kwargs: real_client(transport=httpx.MockTransport(content_api.handle), **kwargs),
    )
    event = {"Records": [make_record("CONTENT.ARTICLE", content_id="missing", new_image={})]}

    with pytest.raises(BatchProcessingError, match="error processing 1 events"):
        await run_batch(event, settings)
    assert fake_es.closed


@pytest.mark.asyncio
async def test_run_batch_success_message(monkeypatch, fake_es, settings, make_record):
    from content_search.indexing import handler as batch_handler

    monkeypatch.setattr(batch_handler, "create_elasticsearch", lambda settings: fake_es)
    event = {"Records": [make_record("CONTENT.ARTICLE", "REMOVE", content_id="a1", old_image={})]}

    assert await run_batch(event, settings) == "Successfully processed all 1 events!"
