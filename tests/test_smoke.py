import base64
import json

from fastapi.testclient import TestClient

from tabconvert.main import app

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_convert_json_upload_to_csv():
    raw = json.dumps([{"id": 1, "name": "Ann"}, {"id": 2, "city": "Montréal"}]).encode("utf-8")

    files = {"file": ("people.json", raw, "application/json")}
    r = client.post("/convert", files=files, data={"output_format": "csv"})
    assert r.status_code == 200

    data = r.json()
    assert data["summary"] == {"rows": 2, "columns": 3, "input_format": "json"}
    assert data["output"]["format"] == "csv"
    assert data["output"]["media_type"] == "text/csv"

    out_bytes = base64.b64decode(data["output"]["content_b64"])
    # UTF-8 BOM bytes
    assert out_bytes.startswith(b"\xef\xbb\xbf")
    out_text = out_bytes.decode("utf-8-sig")
    assert out_text == '"id","name","city"\n"1","Ann",""\n"2","","Montréal"\n'

def test_convert_xml_upload_to_excel():
    raw = b"<items><item><sku>A&amp;1</sku></item><item><sku>B2</sku></item></items>"

    files = {"file": ("items.xml", raw, "application/xml")}
    r = client.post("/convert", files=files, data={"output_format": "xls"})
    assert r.status_code == 200

    data = r.json()
    assert data["output"]["format"] == "excel"
    text = base64.b64decode(data["output"]["content_b64"]).decode("utf-8")
    assert text.count("<Row>") == 3
    assert "A&amp;1" in text

def test_rejects_unknown_upload_extension():
    files = {"file": ("notes.txt", b"hello", "text/plain")}
    r = client.post("/convert", files=files)
    assert r.status_code == 422

def test_invalid_structure_is_422():
    files = {"file": ("numbers.json", b"[1, 2, 3]", "application/json")}
    r = client.post("/convert", files=files)
    assert r.status_code == 422
    assert "array of objects" in r.json()["detail"]

def test_unknown_output_format_is_422():
    files = {"file": ("a.csv", b"a,b\n1,2\n", "text/csv")}
    r = client.post("/convert", files=files, data={"output_format": "pdf"})
    assert r.status_code == 422

def test_service_does_not_fetch_urls():
    # conversions only take uploaded bytes; nothing here reaches out to a URL
    for url in ("http://127.0.0.1:8000/admin", "http://169.254.169.254/latest/meta-data/"):
        r = client.post("/convert/url", json={"url": url, "input_format": "json"})
        assert r.status_code in (404, 405)

    paths = {route.path for route in app.routes}
    assert "/convert/url" not in paths
