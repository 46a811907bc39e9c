import json

import pytest

import tabconvert.cli as cli
from tabconvert.errors import FetchFailed


@pytest.fixture
def fake_fetch(monkeypatch):
    calls = []

    def install(payload=None, error=None):
        def _fetch(url, settings=None):
            calls.append(url)
            if error is not None:
                raise error
            return payload

        monkeypatch.setattr(cli, "fetch", _fetch)
        return calls

    return install


def test_json_to_csv(tmp_path, fake_fetch):
    calls = fake_fetch(b'[{"id": 1, "day": "02-Jan-2020"}, {"id": 2}]')
    out = tmp_path / "out.csv"

    rc = cli.main(["-url", "https://example.com/d.json", "-format", "json", "-out", str(out)])

    assert rc == 0
    assert calls == ["https://example.com/d.json"]
    assert out.read_text(encoding="utf-8-sig") == '"id","day"\n"1","2020-01-02"\n"2",""\n'

def test_xml_to_json_with_double_dash_flags(tmp_path, fake_fetch):
    fake_fetch(b"<r><row><a>1</a></row><row><a>2</a></row></r>")
    out = tmp_path / "out.json"

    rc = cli.main(["--url", "https://example.com/d.xml", "--format", "XML", "--out", str(out)])

    assert rc == 0
    assert json.loads(out.read_text(encoding="utf-8")) == [{"a": "1"}, {"a": "2"}]

def test_unknown_extension_fails_before_fetch(tmp_path, fake_fetch):
    calls = fake_fetch(b"a\n1\n")

    rc = cli.main(["-url", "https://example.com/d.csv", "-out", str(tmp_path / "out.pdf")])

    assert rc == 1
    assert calls == []

def test_missing_url_exits_non_zero():
    with pytest.raises(SystemExit) as exc:
        cli.main(["-out", "x.csv"])
    assert exc.value.code == 2

def test_fetch_failure(tmp_path, fake_fetch):
    fake_fetch(error=FetchFailed("non-200 response: 500 Internal Server Error"))
    out = tmp_path / "out.csv"

    assert cli.main(["-url", "https://example.com/d.csv", "-out", str(out)]) == 1
    assert not out.exists()

def test_conversion_error_leaves_no_file(tmp_path, fake_fetch):
    fake_fetch(b"[]")
    out = tmp_path / "out.json"

    assert cli.main(["-url", "https://example.com/d.json", "-format", "json", "-out", str(out)]) == 1
    assert not out.exists()
