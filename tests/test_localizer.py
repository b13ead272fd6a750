from __future__ import annotations

import hashlib
from pathlib import Path

from conftest import FakeResponse
from cdn_localize.localizer import localize_file, localize_html

RAW = "https://cdn.discordapp.com/attachments/1/2/pic.png?ex=AA&amp;hm=BB"
DECODED = "https://cdn.discordapp.com/attachments/1/2/pic.png?ex=AA&hm=BB"


def _md5(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def test_document_without_matches_is_unchanged(config, make_fetcher) -> None:
    document = "<html><body><img src='https://example.com/a.png'>\r\n</body></html>"
    fetcher, session = make_fetcher({})
    result = localize_html(document, config, fetcher)
    assert result.content == document
    assert result.replacements == 0
    assert session.calls == []


def test_end_to_end_replaces_all_variants(config, make_fetcher) -> None:
    document = f'<img src="{RAW}"><a href="{DECODED}">link</a>'
    fetcher, session = make_fetcher({DECODED: FakeResponse(content=b"\x89PNG", content_type="image/png")})

    result = localize_html(document, config, fetcher)

    expected_path = f"{config.asset_dir.as_posix()}/{_md5(DECODED)}.png"
    assert result.content == f'<img src="{expected_path}"><a href="{expected_path}">link</a>'
    assert RAW not in result.content
    assert DECODED not in result.content
    assert dict(result.associations) == {RAW: expected_path, DECODED: expected_path}
    assert (config.asset_dir / f"{_md5(DECODED)}.png").read_bytes() == b"\x89PNG"
    assert [call[0] for call in session.calls] == [DECODED]


def test_repeated_url_is_downloaded_once(config, make_fetcher) -> None:
    url = "https://cdn.discordapp.com/a.gif"
    document = f"{url} {url} {url}"
    fetcher, session = make_fetcher({url: FakeResponse(content=b"gif")})
    result = localize_html(document, config, fetcher)
    assert len(session.calls) == 1
    assert len(result.assets) == 1
    path = result.assets[0].relative_path
    assert result.content == f"{path} {path} {path}"
    assert result.replacements == 3


def test_variant_spellings_share_one_download(config, make_fetcher) -> None:
    document = f"<a href='{DECODED}'>x</a><img src='{RAW}'>"
    fetcher, session = make_fetcher({DECODED: FakeResponse(content=b"png")})
    result = localize_html(document, config, fetcher)
    assert len(session.calls) == 1
    path = result.assets[0].relative_path
    assert result.content == f"<a href='{path}'>x</a><img src='{path}'>"


def test_failed_candidate_is_left_untouched(config, make_fetcher) -> None:
    good = "https://cdn.discordapp.com/good.png"
    bad = "https://cdn.discordapp.com/bad.png"
    document = f"<img src='{bad}'><img src='{good}'><img src='{bad}'>"
    fetcher, session = make_fetcher({good: FakeResponse(content=b"ok"), bad: FakeResponse(status_code=403)})

    result = localize_html(document, config, fetcher)

    assert result.failed == [bad]
    assert result.content.count(bad) == 2
    assert good not in result.content
    assert [call[0] for call in session.calls] == [bad, good]
    assert [p.name for p in config.asset_dir.iterdir()] == [f"{_md5(good)}.png"]


def test_extension_falls_back_to_content_type(config, make_fetcher) -> None:
    webp = "https://cdn.discordapp.com/emojis/123"
    other = "https://cdn.discordapp.com/stickers/456"
    fetcher, _ = make_fetcher(
        {
            webp: FakeResponse(content=b"w", content_type="image/webp"),
            other: FakeResponse(content=b"o", content_type="application/x-thing"),
        }
    )
    result = localize_html(f"{webp} {other}", config, fetcher)
    assert [asset.filename for asset in result.assets] == [f"{_md5(webp)}.webp", f"{_md5(other)}.bin"]


def test_trailing_separator_variant_is_retried(config, make_fetcher) -> None:
    raw = "https://cdn.discordapp.com/a.png?x=1&amp;&"
    fetched = "https://cdn.discordapp.com/a.png?x=1"
    fetcher, session = make_fetcher({fetched: FakeResponse(content=b"png")})
    result = localize_html(f"<img src='{raw}'>", config, fetcher)
    assert [call[0] for call in session.calls] == [fetched + "&", fetched]
    assert result.content == f"<img src='{result.assets[0].relative_path}'>"
    assert result.assets[0].filename == f"{_md5(fetched)}.png"


def test_dry_run_touches_nothing(config, make_fetcher) -> None:
    config.dry_run = True
    fetcher, session = make_fetcher({})
    document = f"<img src='{RAW}'>"
    result = localize_html(document, config, fetcher)
    assert result.content == document
    assert session.calls == []
    assert not config.asset_dir.exists()


def test_localize_file_rewrites_in_place(tmp_path: Path, config, make_fetcher) -> None:
    url = "https://cdn.discordapp.com/a.mp4"
    page = tmp_path / "page.html"
    page.write_bytes(f"<video src='{url}'></video>\r\n".encode("utf-8"))
    fetcher, _ = make_fetcher({url: FakeResponse(content=b"mp4")})

    result = localize_file(page, config, fetcher)

    path = result.assets[0].relative_path
    assert page.read_bytes() == f"<video src='{path}'></video>\r\n".encode("utf-8")


def test_localize_file_keeps_legacy_encoded_bytes(tmp_path: Path, config, make_fetcher) -> None:
    url = "https://cdn.discordapp.com/a.png"
    page = tmp_path / "page.html"
    page.write_bytes(b"<p>caf\xe9 \x93quoted\x94</p>\r\n<img src='" + url.encode("ascii") + b"'>")
    fetcher, session = make_fetcher({url: FakeResponse(content=b"png")})

    result = localize_file(page, config, fetcher)

    path = result.assets[0].relative_path
    assert [call[0] for call in session.calls] == [url]
    assert page.read_bytes() == (
        b"<p>caf\xe9 \x93quoted\x94</p>\r\n<img src='" + path.encode("ascii") + b"'>"
    )


def test_url_with_undecodable_byte_is_left_untouched(tmp_path: Path, config, make_fetcher) -> None:
    page = tmp_path / "page.html"
    original = b"<img src='https://cdn.discordapp.com/caf\xe9.png'>"
    page.write_bytes(original)
    fetcher, _ = make_fetcher(
        {"https://cdn.discordapp.com/caf\udce9.png": UnicodeEncodeError("utf-8", "\udce9", 0, 1, "surrogates not allowed")}
    )

    result = localize_file(page, config, fetcher)

    assert result.failed == ["https://cdn.discordapp.com/caf\udce9.png"]
    assert page.read_bytes() == original
