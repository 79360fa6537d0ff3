"""Storage gateways for the single board document.

Three interchangeable backends share one read/write/reset contract: a hosted
JSON bin reached over HTTP, a local JSON file, and process memory. Every save
replaces the whole document; the last writer wins.
"""

import copy
import json
import traceback
from pathlib import Path
from urllib import error, request

from documents import DEFAULT_NAMES, initial_document, normalize_document, rename_author
from store_config import get_data_path, get_jsonbin_settings, get_store_kind


class GatewayError(RuntimeError):
    """Raised when a backend cannot produce a usable document."""


class Gateway:
    """Read/write contract shared by every storage backend."""

    default_names = ()

    def initial(self):
        """Return the document served when nothing has been stored yet."""
        return initial_document(self.default_names)

    def read(self):
        raise NotImplementedError

    def write(self, doc):
        raise NotImplementedError

    def reset(self):
        """Overwrite the stored document with the initial document."""
        return self.write(self.initial())

    def rename_author(self, old_name, new_name):
        """Rewrite authorship server-side and store the result.

        There is no guard against a concurrent write landing between the
        read and the write-back.

        :returns: Updated document, or ``None`` when the write failed.
        :rtype: dict | None
        """
        updated = rename_author(self.read(), old_name, new_name)
        if not self.write(updated):
            return None
        return updated


class MemoryGateway(Gateway):
    """Process-local gateway with no persistence."""

    def __init__(self, doc=None):
        self._doc = copy.deepcopy(doc) if doc is not None else None

    def read(self):
        if self._doc is None:
            return self.initial()
        return copy.deepcopy(self._doc)

    def write(self, doc):
        self._doc = copy.deepcopy(doc)
        return True


class FileGateway(Gateway):
    """Gateway storing the document as one JSON file."""

    def __init__(self, path):
        self.path = Path(path)

    def _ensure_file(self):
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self.initial(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def read(self):
        """Load the document, creating the file with initial content if absent.

        :raises GatewayError: If the file cannot be read or decoded.
        """
        try:
            self._ensure_file()
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return normalize_document(raw)
        except (OSError, ValueError) as exc:
            print(f"Error reading data file {self.path}: {exc}")
            raise GatewayError(f"Failed to read {self.path}") from exc

    def write(self, doc):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            tmp_path.write_text(
                json.dumps(doc, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            tmp_path.replace(self.path)
            return True
        except (OSError, TypeError, ValueError) as exc:
            print(f"Error saving data file {self.path}: {exc}")
            return False


class JsonBinGateway(Gateway):
    """Gateway backed by a hosted JSON bin (JSONBin v3 API)."""

    default_names = tuple(DEFAULT_NAMES)

    def __init__(self, base_url, bin_id, master_key=None, timeout=10.0):
        self.base_url = base_url.rstrip("/")
        self.bin_id = bin_id
        self.master_key = master_key
        self.timeout = timeout

    def _headers(self):
        headers = {"Content-Type": "application/json"}
        if self.master_key:
            headers["X-Master-Key"] = self.master_key
        return headers

    def read(self):
        """Fetch the latest bin record.

        A missing bin, a non-2xx answer or a network failure all degrade to
        the initial document.
        """
        req = request.Request(
            f"{self.base_url}/{self.bin_id}/latest",
            headers=self._headers(),
            method="GET",
        )
        try:
            with request.urlopen(req, timeout=self.timeout) as response:
                payload = json.loads(response.read().decode("utf-8"))
            return normalize_document(payload["record"])
        except error.HTTPError as exc:
            print(f"Bin not found (HTTP {exc.code}), returning initial data")
            return self.initial()
        except (error.URLError, OSError, ValueError, KeyError, TypeError):
            print("Error reading data:")
            traceback.print_exc()
            return self.initial()

    def write(self, doc):
        req = request.Request(
            f"{self.base_url}/{self.bin_id}",
            data=json.dumps(doc, ensure_ascii=False).encode("utf-8"),
            headers=self._headers(),
            method="PUT",
        )
        try:
            with request.urlopen(req, timeout=self.timeout):
                return True
        except error.HTTPError as exc:
            reason = "Invalid API key" if exc.code == 401 else exc.reason
            print(f"Error saving data: HTTP {exc.code}: {reason}")
            return False
        except (error.URLError, OSError, TypeError, ValueError) as exc:
            print(f"Error saving data: {exc}")
            return False


def create_gateway(kind=None):
    """Build the gateway selected by configuration.

    :param kind: Backend name; defaults to ``BOARD_STORE``.
    :type kind: str | None
    :returns: Configured gateway instance.
    :rtype: Gateway
    """
    kind = kind or get_store_kind()
    if kind == "file":
        return FileGateway(get_data_path())
    if kind == "jsonbin":
        return JsonBinGateway(**get_jsonbin_settings())
    return MemoryGateway()
