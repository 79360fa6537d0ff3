"""Read/write/reset contract across the memory, file and hosted-bin gateways."""

import json
from urllib import error

import pytest

import gateway
from documents import DEFAULT_NAMES, initial_document
from tests.test_doubles import FakeResponse, FakeUrlopen, http_error

pytestmark = pytest.mark.store


def _bin(urlopen, monkeypatch, master_key=None):
    monkeypatch.setattr(gateway.request, "urlopen", urlopen)
    return gateway.JsonBinGateway("https://bins.example/v3/b/", "bin123", master_key=master_key)


def test_memory_read_without_data_returns_initial_document():
    assert gateway.MemoryGateway().read() == initial_document()


def test_memory_round_trip_and_isolation(sample_document):
    store = gateway.MemoryGateway()
    assert store.write(sample_document) is True

    loaded = store.read()
    assert loaded == sample_document
    # Callers get copies; mutating one does not touch the stored document.
    loaded["threads"].clear()
    assert store.read() == sample_document


def test_memory_reset_restores_initial_document(memory_gateway):
    assert memory_gateway.reset() is True
    assert memory_gateway.read() == initial_document()


def test_rename_author_rewrites_stored_document(memory_gateway):
    updated = memory_gateway.rename_author("Bob", "Robert")

    assert updated == memory_gateway.read()
    thread = updated["threads"][0]
    assert thread["author"] == "Robert"
    assert [c["author"] for c in thread["comments"]] == ["Robert", "Carol", "Robert"]


def test_rename_author_returns_none_when_write_fails(failing_gateway):
    assert failing_gateway.rename_author("Bob", "Robert") is None
    assert failing_gateway.read()["threads"][0]["author"] == "Bob"


def test_file_read_creates_missing_file_with_initial_document(tmp_path):
    path = tmp_path / "nested" / "board.json"
    store = gateway.FileGateway(path)

    assert store.read() == initial_document()
    assert json.loads(path.read_text(encoding="utf-8")) == initial_document()


def test_file_round_trip_and_reset(tmp_path, sample_document):
    store = gateway.FileGateway(tmp_path / "board.json")

    assert store.write(sample_document) is True
    assert store.read() == sample_document
    assert store.reset() is True
    assert store.read() == initial_document()
    assert not (tmp_path / "board.json.tmp").exists()


def test_file_read_of_corrupt_file_raises_gateway_error(tmp_path, capsys):
    path = tmp_path / "board.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(gateway.GatewayError):
        gateway.FileGateway(path).read()
    assert "Error reading data file" in capsys.readouterr().out


def test_file_write_failure_returns_false(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = gateway.FileGateway(blocker / "board.json")

    assert store.write(initial_document()) is False


def test_jsonbin_read_unwraps_record_and_sends_master_key(monkeypatch, sample_document):
    urlopen = FakeUrlopen(FakeResponse({"record": sample_document, "metadata": {}}))
    store = _bin(urlopen, monkeypatch, master_key="secret")

    assert store.read() == sample_document
    req = urlopen.requests[0]
    assert req.full_url == "https://bins.example/v3/b/bin123/latest"
    assert req.get_method() == "GET"
    assert req.get_header("X-master-key") == "secret"


@pytest.mark.parametrize(
    "failure",
    [
        http_error("https://bins.example/v3/b/bin123/latest", 404, "Not Found"),
        error.URLError("connection refused"),
    ],
)
def test_jsonbin_read_failure_falls_back_to_initial_document(monkeypatch, failure):
    store = _bin(FakeUrlopen(failure), monkeypatch)

    doc = store.read()

    assert doc == initial_document(DEFAULT_NAMES)
    assert doc["availableNames"] == DEFAULT_NAMES


def test_jsonbin_write_puts_whole_document(monkeypatch, sample_document):
    urlopen = FakeUrlopen(FakeResponse({"record": sample_document}))
    store = _bin(urlopen, monkeypatch)

    assert store.write(sample_document) is True
    req = urlopen.requests[0]
    assert req.full_url == "https://bins.example/v3/b/bin123"
    assert req.get_method() == "PUT"
    assert json.loads(req.data.decode("utf-8")) == sample_document
    assert req.get_header("X-master-key") is None


def test_jsonbin_write_reports_invalid_api_key(monkeypatch, capsys):
    urlopen = FakeUrlopen(http_error("https://bins.example/v3/b/bin123", 401, "Unauthorized"))
    store = _bin(urlopen, monkeypatch)

    assert store.write(initial_document()) is False
    assert "Invalid API key" in capsys.readouterr().out


def test_jsonbin_reset_writes_initial_document_with_default_names(monkeypatch):
    urlopen = FakeUrlopen(FakeResponse({}))
    store = _bin(urlopen, monkeypatch)

    assert store.reset() is True
    assert json.loads(urlopen.requests[0].data.decode("utf-8")) == initial_document(DEFAULT_NAMES)


@pytest.mark.parametrize(
    "kind,expected",
    [("memory", gateway.MemoryGateway), ("file", gateway.FileGateway), ("jsonbin", gateway.JsonBinGateway)],
)
def test_create_gateway_selects_backend(kind, expected):
    assert isinstance(gateway.create_gateway(kind), expected)


def test_create_gateway_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("BOARD_STORE", "file")
    monkeypatch.setenv("BOARD_DATA_PATH", str(tmp_path / "x.json"))

    store = gateway.create_gateway()

    assert isinstance(store, gateway.FileGateway)
    assert store.path == tmp_path / "x.json"


def test_jsonbin_read_of_malformed_record_falls_back_to_initial_document(monkeypatch):
    store = _bin(FakeUrlopen(FakeResponse({"record": {"threads": [1]}})), monkeypatch)

    assert store.read() == initial_document(DEFAULT_NAMES)


def test_file_read_of_malformed_thread_raises_gateway_error(tmp_path):
    path = tmp_path / "board.json"
    path.write_text(json.dumps({"threads": [1]}), encoding="utf-8")

    with pytest.raises(gateway.GatewayError):
        gateway.FileGateway(path).read()
