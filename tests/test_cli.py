import httpx
import pytest

from client import Api, FetchApi, MemoryTokenStore
from client.__main__ import build_parser, poll_status


def status_api(handler):
    store = MemoryTokenStore()
    fetch = FetchApi("http://test.local", token_provider=store, transport=httpx.MockTransport(handler))
    return Api(fetch, token_store=store)


@pytest.mark.asyncio
async def test_poll_prints_status_message(capsys):
    api = status_api(
        lambda request: httpx.Response(
            200, json={"message": "Backend is RUNNING", "timestamp": "2026-10-19T00:00:00Z", "v": "version 2"}
        )
    )

    code = await poll_status(api, interval=0.0, count=1)

    assert code == 0
    assert capsys.readouterr().out.strip() == "Status: Backend is RUNNING"


@pytest.mark.asyncio
async def test_poll_repeats_and_reports_failures(capsys):
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("refused", request=request)

    code = await poll_status(status_api(handler), interval=0.01, count=3)

    assert code == 1
    assert len(calls) == 3
    assert capsys.readouterr().out.count("Status: unavailable") == 3


def test_parser_commands():
    args = build_parser().parse_args(["--base-url", "http://x", "download", "/exports/1", "--filename", "a.bin"])

    assert args.command == "download"
    assert args.base_url == "http://x"
    assert args.endpoint == "/exports/1"
    assert args.filename == "a.bin"
