import asyncio
import json
import logging

from aiohttp import test_utils

from dazibao.common.state import SharedConfigStore
from dazibao.services.web import PageRenderer, WebService, encode_for_script

from conftest import group, make_tree, single


def request(service, path):
    """GET path against the service's app; returns (status, content_type, body)"""
    async def scenario():
        async with test_utils.TestClient(test_utils.TestServer(service.create_app())) as client:
            response = await client.get(path)
            return response.status, response.content_type, await response.text(errors="replace")

    return asyncio.run(scenario())


def make_service(settings, tree=None, **kwargs):
    tree = tree or make_tree(single(command="echo hi"), group())
    tree.blocks[0].output = "<b>hi</b>"
    store = SharedConfigStore(tree)
    renderer = PageRenderer(settings.template_path, settings.icon_path)
    return WebService(store, renderer, **kwargs)


def test_root_renders_snapshot_into_page(settings):
    status, content_type, body = request(make_service(settings), "/")
    assert status == 200
    assert content_type == "text/html"
    assert "${config_json}" not in body
    assert "data:image/png;base64," in body
    # Embedded JSON is escaped for the script element
    assert "\\u003cb\\u003ehi\\u003c/b\\u003e" in body
    assert "<b>hi</b>" not in body


def test_root_returns_500_without_template(settings):
    settings.template_path.unlink()
    status, _, body = request(make_service(settings), "/")
    assert status == 500
    assert body == "Failed to generate page"


def test_data_returns_snapshot_json(settings):
    status, content_type, body = request(make_service(settings), "/data")
    data = json.loads(body)
    assert status == 200
    assert content_type == "application/json"
    assert data["blocks"][0]["output"] == "<b>hi</b>"
    assert [c["label"] for c in data["blocks"][1]["commands"]] == ["A", "B"]
    assert data["port"] == 8080


def test_icon_is_served(settings):
    status, content_type, _ = request(make_service(settings), "/icons/dazibao.png")
    assert status == 200
    assert content_type == "image/png"


def test_missing_icon_is_404(settings):
    settings.icon_path.unlink()
    status, _, body = request(make_service(settings), "/icons/dazibao.png")
    assert status == 404
    assert body == "Icon not found"


def test_health_reports_stats(settings):
    service = make_service(settings, stats_provider=lambda: {"block-0:Echo": {"execution_count": 3}})
    status, _, body = request(service, "/health")
    data = json.loads(body)
    assert status == 200
    assert data["service"] == "web"
    assert data["store"]["mutation_count"] == 0
    assert data["schedulers"]["block-0:Echo"]["execution_count"] == 3


def test_render_without_snapshot_embeds_null(settings):
    html = PageRenderer(settings.template_path, settings.icon_path).render_html(None)
    assert "var initial = null;" in html


def test_encode_for_script_escapes_markup():
    encoded = encode_for_script({"x": "</script>&"})
    assert "<" not in encoded
    assert ">" not in encoded
    assert "&" not in encoded
    assert json.loads(encoded) == {"x": "</script>&"}


def test_data_skips_debug_dump_unless_debug_enabled(settings, monkeypatch):
    from types import SimpleNamespace

    import dazibao.services.web.service as web_service

    dumps_calls = []
    monkeypatch.setattr(
        web_service, "json",
        SimpleNamespace(dumps=lambda data, **kw: dumps_calls.append(data) or "{}"),
    )
    web_logger = logging.getLogger("dazibao.web")
    previous = web_logger.level
    try:
        web_logger.setLevel(logging.INFO)
        status, _, _ = request(make_service(settings), "/data")
        assert status == 200
        assert dumps_calls == []

        web_logger.setLevel(logging.DEBUG)
        request(make_service(settings), "/data")
        assert len(dumps_calls) == 1
    finally:
        web_logger.setLevel(previous)
