import itertools
import io
from types import SimpleNamespace

import requests
from PIL import Image

from app.overlay import reference
from app.overlay.ingestion.models import OverlayRequest


def png_bytes(size):
    buf = io.BytesIO()
    Image.new("RGB", size).save(buf, format="PNG")
    return buf.getvalue()


class FakeResponse:
    def __init__(self, body, status=200):
        self.body = body
        self.status = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i:i + chunk_size]


def fake_get(body, status=200, calls=None):
    def _get(url, timeout=None, stream=False):
        if calls is not None:
            calls.append((url, timeout, stream))
        return FakeResponse(body, status)
    return _get


def test_reads_size_from_png(monkeypatch):
    calls = []
    monkeypatch.setattr(requests, "get", fake_get(png_bytes((33, 21)), calls=calls))
    assert reference.fetch_reference_size("https://example.com/a.png", timeout=2.0) == (33, 21)
    assert calls == [("https://example.com/a.png", 2.0, True)]


def test_timeout_falls_back(monkeypatch):
    def timeout(*args, **kwargs):
        raise requests.Timeout("slow")

    monkeypatch.setattr(requests, "get", timeout)
    assert reference.fetch_reference_size("https://example.com/a.png") is None


def test_http_error_falls_back(monkeypatch):
    monkeypatch.setattr(requests, "get", fake_get(b"", status=404))
    assert reference.fetch_reference_size("https://example.com/missing.png") is None


def test_unsupported_scheme_is_not_fetched(monkeypatch):
    calls = []
    monkeypatch.setattr(requests, "get", fake_get(b"", calls=calls))
    assert reference.fetch_reference_size("file:///etc/passwd") is None
    assert calls == []


def test_byte_cap(monkeypatch):
    monkeypatch.setattr(requests, "get", fake_get(b"\0" * 300_000))
    assert reference.fetch_reference_size("https://example.com/a.png", max_bytes=100_000) is None


def test_stops_reading_once_size_is_known(monkeypatch):
    body = png_bytes((48, 36)) + b"\0" * (16 * 1024 * 1024)
    served = []

    class Tracked(FakeResponse):
        def iter_content(self, chunk_size=1):
            for chunk in super().iter_content(chunk_size):
                served.append(len(chunk))
                yield chunk

    monkeypatch.setattr(requests, "get", lambda url, timeout=None, stream=False: Tracked(body))
    assert reference.fetch_reference_size("https://example.com/a.png") == (48, 36)
    assert len(served) == 1


def test_total_download_time_is_bounded(monkeypatch):
    clock = itertools.count(0, 3)
    monkeypatch.setattr(reference, "time", SimpleNamespace(monotonic=lambda: next(clock)))
    monkeypatch.setattr(requests, "get", fake_get(b"\0" * 300_000))
    assert reference.fetch_reference_size("https://example.com/slow", timeout=5.0) is None


def test_not_an_image(monkeypatch):
    monkeypatch.setattr(requests, "get", fake_get(b"<html>nope</html>"))
    assert reference.fetch_reference_size("https://example.com/page") is None


def test_fills_only_missing_dimension(monkeypatch):
    monkeypatch.setattr(reference, "fetch_reference_size", lambda url, timeout, max_bytes: (800, 600))
    req = OverlayRequest(width=100, reference_image_url="https://example.com/a.png")
    out = reference.apply_reference_size(req)
    assert (out.width, out.height) == (100, 600)


def test_no_url_no_fetch():
    req = OverlayRequest()
    assert reference.apply_reference_size(req) is req


def test_failed_probe_keeps_request(monkeypatch):
    monkeypatch.setattr(reference, "fetch_reference_size", lambda url, timeout, max_bytes: None)
    req = OverlayRequest(reference_image_url="https://example.com/a.png")
    out = reference.apply_reference_size(req)
    assert out.width is None and out.height is None
