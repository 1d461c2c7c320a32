from fastapi.testclient import TestClient
from contact_import.main import app

client = TestClient(app)

SAMPLE = (
    "Anna Meyer|030 1234567|03.05.1991|Lindenstr. 13, 34212 Melsungen\n"
    "Josefine Katharina Braun|0151 23456789|7.1.1985|57629 Stein-Wingert\n"
    "Jörg Müller|+49 171 9876543|12.12.1970|Bahnhofstr. 7, 01945 Ruhland\n"
)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_parse_upload():
    files = {"file": ("contacts.txt", SAMPLE.encode("utf-8"), "text/plain")}
    r = client.post("/import/parse", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["success"] is True
    assert data["stats"]["parsed_successfully"] == 3
    assert data["stats"]["detected_delimiter"] == "pipe"
    assert data["stats"]["detected_format"] == "delimited_data"

    first = data["leads"][0]
    assert first["first_name"] == "Anna"
    assert first["phone"] == "+49301234567"
    assert first["date_of_birth"] == "1991-05-03"
    assert first["plz"] == "34212"
    assert data["leads"][2]["last_name"] == "Müller"

def test_parse_upload_strips_utf8_bom():
    raw = ("name;email\nAnna Meyer;ANNA@example.com\n").encode("utf-8-sig")

    files = {"file": ("contacts.csv", raw, "text/csv")}
    r = client.post("/import/parse", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["stats"]["detected_format"] == "csv_with_header"
    assert data["leads"][0]["email"] == "anna@example.com"

def test_preview_upload_truncates_but_keeps_stats():
    files = {"file": ("contacts.csv", SAMPLE.encode("utf-8"), "text/csv")}
    r = client.post("/import/preview", files=files, data={"max_rows": "1"})
    assert r.status_code == 200

    data = r.json()
    assert len(data["leads"]) == 1
    assert data["stats"]["parsed_successfully"] == 3

def test_preview_rejects_non_positive_max_rows():
    files = {"file": ("contacts.csv", SAMPLE.encode("utf-8"), "text/csv")}
    r = client.post("/import/preview", files=files, data={"max_rows": "0"})
    assert r.status_code == 422

def test_empty_upload_is_reported_not_rejected():
    files = {"file": ("empty.csv", b"\n  \n", "text/csv")}
    r = client.post("/import/parse", files=files)
    assert r.status_code == 200

    data = r.json()
    assert data["success"] is False
    assert data["errors"] == [{"line_number": 0, "error_message": "File is empty", "raw_line": ""}]

def test_rejects_unsupported_extension():
    files = {"file": ("contacts.xlsx", b"irrelevant", "application/octet-stream")}
    r = client.post("/import/parse", files=files)
    assert r.status_code == 422

def test_rejects_non_utf8_bytes():
    raw = "name\nPaul Montréal\n".encode("latin-1")

    files = {"file": ("contacts.csv", raw, "text/csv")}
    r = client.post("/import/parse", files=files)
    assert r.status_code == 422
    assert r.json()["detail"] == "File must be UTF-8 encoded text"

def test_accepts_allowed_content_type_without_known_extension():
    files = {"file": ("export", SAMPLE.encode("utf-8"), "text/plain")}
    r = client.post("/import/parse", files=files)
    assert r.status_code == 200
    assert r.json()["stats"]["parsed_successfully"] == 3

def test_csv_template_parses_into_two_leads():
    r = client.get("/import/template", params={"format": "csv"})
    assert r.status_code == 200
    assert 'filename="import_template.csv"' in r.headers["content-disposition"]

    files = {"file": ("import_template.csv", r.content, "text/csv")}
    data = client.post("/import/parse", files=files).json()
    assert data["stats"]["detected_format"] == "csv_with_header"
    assert data["stats"]["detected_delimiter"] == "comma"
    assert [lead["last_name"] for lead in data["leads"]] == ["Mustermann", "Schmidt"]
    assert data["leads"][1]["city"] == "München"
    assert data["leads"][0]["date_of_birth"] == "1990-01-01"
    assert data["errors"] == []

def test_pipe_template_is_the_default_and_parses_into_two_leads():
    r = client.get("/import/template")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert 'filename="import_template.txt"' in r.headers["content-disposition"]

    files = {"file": ("import_template.txt", r.content, "text/plain")}
    data = client.post("/import/parse", files=files).json()
    assert data["stats"]["detected_format"] == "csv_with_header"
    assert data["stats"]["detected_delimiter"] == "pipe"
    assert [(lead["first_name"], lead["plz"]) for lead in data["leads"]] == [
        ("Max", "12345"),
        ("Anna", "54321"),
    ]

def test_unknown_template_format_falls_back_to_pipe():
    r = client.get("/import/template", params={"format": "xlsx"})
    assert r.status_code == 200
    assert r.text.startswith("Full Name | Phone")
