import sys
from pathlib import Path

import pytest

# Enforce marker discipline so each test maps to a documented suite category.
ALLOWED_MARKERS = {"web", "api", "store", "board", "integration"}

# Keep `board` and the top-level modules importable when pytest is launched from different working dirs.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
for path in (PROJECT_ROOT, PROJECT_ROOT / "src"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from gateway import MemoryGateway  # noqa: E402


def pytest_configure(config):
    for marker in sorted(ALLOWED_MARKERS):
        config.addinivalue_line("markers", f"{marker}: {marker} test suite")


@pytest.fixture
def sample_document():
    """Deterministic board document with two threads, newest first."""
    return {
        "threads": [
            {
                "id": "1700000002000",
                "title": "Community garden app",
                "description": "Match neighbours with spare plots.",
                "author": "Bob",
                "participants": ["Bob", "Carol"],
                "comments": [
                    {"id": "1700000003000", "content": "Love it", "author": "Bob",
                     "timestamp": "2023-11-14T22:13:23.000Z"},
                    {"id": "1700000004000", "content": "Count me in", "author": "Carol",
                     "timestamp": "2023-11-14T22:13:24.000Z"},
                    {"id": "1700000005000", "content": "Plots open Monday", "author": "Bob",
                     "timestamp": "2023-11-14T22:13:25.000Z"},
                ],
                "createdAt": "2023-11-14T22:13:22.000Z",
            },
            {
                "id": "1700000001000",
                "title": "Book swap shelf",
                "description": "A shelf in the lobby.",
                "author": "Carol",
                "participants": ["Carol"],
                "comments": [],
                "createdAt": "2023-11-14T22:13:21.000Z",
            },
        ],
        "userName": "",
        "availableNames": ["Bob", "Carol"],
    }


@pytest.fixture
def memory_gateway(sample_document):
    return MemoryGateway(sample_document)


@pytest.fixture
def app(memory_gateway):
    """Create the Flask app over an in-memory gateway seeded with the sample document."""
    from board import create_app

    app = create_app(
        test_config={"TESTING": True, "SECRET_KEY": "test", "ADMIN_PASSWORD": "12345"},
        gateway=memory_gateway,
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


class FailingGateway(MemoryGateway):
    """Gateway whose writes always fail, as a rejected backend save would."""

    def write(self, doc):
        self.attempts = getattr(self, "attempts", 0) + 1
        return False


@pytest.fixture
def failing_gateway(sample_document):
    return FailingGateway(sample_document)


def pytest_collection_modifyitems(session, config, items):
    unmarked = []
    for item in items:
        # Accept tests carrying any one approved marker; multiple markers are also valid.
        if not ALLOWED_MARKERS.intersection(item.keywords):
            unmarked.append(item.nodeid)

    if unmarked:
        # Fail collection early so CI does not run partially categorized suites.
        joined = "\n".join(f"- {nodeid}" for nodeid in unmarked)
        raise pytest.UsageError(
            "Each test must include at least one approved marker "
            f"({', '.join(sorted(ALLOWED_MARKERS))}).\n"
            "Unmarked tests:\n"
            f"{joined}"
        )
