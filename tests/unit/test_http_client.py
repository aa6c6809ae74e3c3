"""
Tests for the prediction API client, and a full warm cycle against a local
aiohttp server.
"""

import pytest
from contextlib import asynccontextmanager
from aiohttp import test_utils, web
from prewarm.config import WarmerConfig
from prewarm.exception import HttpStatusError, PollFetchError
from prewarm.util.http_client import PredictionClient
from prewarm.warmer.scheduler import WarmingScheduler
from tests.conftest import RecordingHooks


@asynccontextmanager
async def prediction_server(
    create_status=201, poll_statuses=("processing", "succeeded"), poll_http=200, error_body=None
):
    """
    Local server emulating the prediction API; requests are recorded.
    """
    polls = list(poll_statuses)
    record = {"created": [], "polled": []}

    async def create(request):
        record["created"].append(await request.json())
        if create_status >= 400 and error_body is not None:
            return web.Response(
                body=error_body, status=create_status, content_type="text/plain", charset="utf-8"
            )
        if create_status >= 400:
            return web.json_response({"detail": "boom"}, status=create_status)
        return web.json_response(
            {"predictionId": "abc", "status": "starting", "logs": ["queued"]},
            status=create_status,
        )

    async def status(request):
        record["polled"].append(request.match_info["prediction_id"])
        if poll_http >= 400:
            return web.json_response({"detail": "gone"}, status=poll_http)
        return web.json_response({"status": polls.pop(0) if polls else "succeeded"})

    app = web.Application()
    app.add_routes(
        [
            web.post("/api/predictions/warm", create),
            web.get("/api/predictions/{prediction_id}", status),
        ]
    )
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        yield f"http://{server.host}:{server.port}", record
    finally:
        await server.close()


class TestPredictionClient:
    @pytest.mark.asyncio
    async def test_create_warm_prediction(self):
        async with prediction_server() as (base_url, record):
            async with PredictionClient(base_url) as client:
                prediction = await client.create_warm_prediction("data:x", "/gifs/thumbs_up.gif")

        assert prediction.prediction_id == "abc"
        assert prediction.status == "starting"
        assert prediction.logs == ["queued"]
        assert record["created"] == [{"source": "data:x", "target": "/gifs/thumbs_up.gif"}]

    @pytest.mark.asyncio
    async def test_create_non_ok_raises_status_error(self):
        async with prediction_server(create_status=503) as (base_url, _):
            async with PredictionClient(base_url) as client:
                with pytest.raises(HttpStatusError) as excinfo:
                    await client.create_warm_prediction("data:x", "/gifs/thumbs_up.gif")

        assert excinfo.value.status == 503

    @pytest.mark.asyncio
    async def test_undecodable_error_body_still_raises_status_error(self):
        async with prediction_server(create_status=502, error_body=b"\xff\xfe bad gateway \x80") as (
            base_url,
            _,
        ):
            async with PredictionClient(base_url) as client:
                with pytest.raises(HttpStatusError) as excinfo:
                    await client.create_warm_prediction("data:x", "/gifs/thumbs_up.gif")

        assert excinfo.value.status == 502

    @pytest.mark.asyncio
    async def test_get_prediction(self):
        async with prediction_server(poll_statuses=("succeeded",)) as (base_url, record):
            async with PredictionClient(base_url) as client:
                prediction = await client.get_prediction("abc")

        assert prediction.succeeded
        assert record["polled"] == ["abc"]

    @pytest.mark.asyncio
    async def test_get_prediction_non_ok_raises_poll_fetch_error(self):
        async with prediction_server(poll_http=404) as (base_url, _):
            async with PredictionClient(base_url) as client:
                with pytest.raises(PollFetchError) as excinfo:
                    await client.get_prediction("abc")

        assert excinfo.value.status == 404


class TestWarmCycleOverHttp:
    @pytest.mark.asyncio
    async def test_full_cycle_succeeds(self):
        hooks = RecordingHooks()
        async with prediction_server() as (base_url, record):
            scheduler = WarmingScheduler(
                WarmerConfig(base_url=base_url, poll_interval=0.01, hooks=hooks)
            )
            task = scheduler.trigger()
            await task

        assert hooks.errors == []
        assert hooks.completed == 1
        assert record["polled"] == ["abc", "abc"]
        (body,) = record["created"]
        assert body["source"].startswith("data:image/jpeg;base64,")
        assert body["target"] == "/gifs/thumbs_up.gif"
        assert scheduler.status().can_warm is False

    @pytest.mark.asyncio
    async def test_server_error_on_create(self):
        hooks = RecordingHooks()
        async with prediction_server(create_status=500) as (base_url, record):
            scheduler = WarmingScheduler(WarmerConfig(base_url=base_url, hooks=hooks))
            await scheduler.warm()

        (error,) = hooks.errors
        assert isinstance(error, HttpStatusError)
        assert error.status == 500
        assert str(error) == "Warming failed: 500"
        assert scheduler.state.last_warm_attempt_at == 0.0
        assert record["polled"] == []

    @pytest.mark.asyncio
    async def test_undecodable_error_body_keeps_attempt_timestamp(self):
        hooks = RecordingHooks()
        async with prediction_server(create_status=500, error_body=b"\xc3\x28\xff") as (base_url, _):
            scheduler = WarmingScheduler(WarmerConfig(base_url=base_url, hooks=hooks))
            await scheduler.warm()

        (error,) = hooks.errors
        assert isinstance(error, HttpStatusError)
        assert error.status == 500
        assert scheduler.state.last_warm_attempt_at == 0.0
