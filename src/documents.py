"""Pure helpers for the single board document.

Every mutation returns a new document; inputs are never modified in place,
so callers can keep the old copy until a save is acknowledged.
"""

import copy
from datetime import datetime, timezone

DEFAULT_NAMES = ["山田太郎", "佐藤花子", "田中一郎", "鈴木美咲", "高橋健太"]

YOU_LABEL = "you"
AUTHOR_LABEL = "author"
ANONYMOUS_LABEL = "anonymous"


def initial_document(default_names=None):
    """Return a fresh initial board document.

    :param default_names: Names offered in the picker before anyone signs in.
    :type default_names: list[str] | None
    :returns: Document with no threads.
    :rtype: dict
    """
    return {
        "threads": [],
        "userName": "",
        "availableNames": list(default_names or []),
    }


def normalize_document(raw):
    """Fill keys missing from older documents with empty values.

    :param raw: Decoded JSON document.
    :type raw: dict
    :returns: Copy of ``raw`` with ``threads``, ``userName`` and ``availableNames`` present.
    :rtype: dict
    :raises ValueError: If ``raw`` is not a JSON object, ``threads`` is not a
        list, or a thread is not an object.
    """
    if not isinstance(raw, dict):
        raise ValueError("Board document must be a JSON object")
    doc = copy.deepcopy(raw)
    doc.setdefault("threads", [])
    doc.setdefault("userName", "")
    if doc.get("availableNames") is None:
        doc["availableNames"] = []
    if not isinstance(doc["threads"], list):
        raise ValueError("Board document 'threads' must be a list")
    for thread in doc["threads"]:
        if not isinstance(thread, dict):
            raise ValueError("Board document threads must be objects")
        thread.setdefault("participants", [])
        thread.setdefault("comments", [])
    return doc


def _now():
    return datetime.now(timezone.utc)


def _timestamp_id(now):
    return str(int(now.timestamp() * 1000))


def _iso(now):
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _require(value, field):
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{field} must not be empty")
    return cleaned


def find_thread(doc, thread_id):
    """Return the thread with ``thread_id`` or ``None``."""
    for thread in doc["threads"]:
        if thread["id"] == thread_id:
            return thread
    return None


def add_available_name(doc, name):
    """Return a document whose ``availableNames`` contains ``name``."""
    name = _require(name, "name")
    new_doc = copy.deepcopy(doc)
    names = new_doc.setdefault("availableNames", [])
    if name not in names:
        names.append(name)
    return new_doc


def build_thread(title, description, author, now=None):
    """Build a new thread owned by ``author``.

    The id is derived from the creation time in milliseconds and is not
    unique when two threads are created in the same millisecond.
    """
    now = now or _now()
    author = _require(author, "author")
    return {
        "id": _timestamp_id(now),
        "title": _require(title, "title"),
        "description": _require(description, "description"),
        "author": author,
        "participants": [author],
        "comments": [],
        "createdAt": _iso(now),
    }


def create_thread(doc, title, description, author, now=None):
    """Return a document with a new thread prepended."""
    thread = build_thread(title, description, author, now=now)
    new_doc = copy.deepcopy(doc)
    new_doc["threads"] = [thread] + new_doc["threads"]
    return new_doc


def join_thread(doc, thread_id, user):
    """Return a document where ``user`` participates in ``thread_id``.

    Joining twice, or joining an unknown thread, leaves the document unchanged.
    """
    user = _require(user, "user")
    new_doc = copy.deepcopy(doc)
    thread = find_thread(new_doc, thread_id)
    if thread is not None and user not in thread["participants"]:
        thread["participants"].append(user)
    return new_doc


def build_comment(content, author, now=None):
    """Build a comment by ``author``."""
    now = now or _now()
    return {
        "id": _timestamp_id(now),
        "content": _require(content, "content"),
        "author": _require(author, "author"),
        "timestamp": _iso(now),
    }


def add_comment(doc, thread_id, content, author, now=None):
    """Return a document with one comment appended to ``thread_id``."""
    comment = build_comment(content, author, now=now)
    new_doc = copy.deepcopy(doc)
    thread = find_thread(new_doc, thread_id)
    if thread is not None:
        thread["comments"].append(comment)
    return new_doc


def rename_author(doc, old_name, new_name):
    """Rewrite historical authorship from ``old_name`` to ``new_name``.

    Thread authors, comment authors and participant entries are rewritten;
    every other name is left alone.
    """
    new_name = _require(new_name, "new name")
    new_doc = copy.deepcopy(doc)
    for thread in new_doc["threads"]:
        if thread.get("author") == old_name:
            thread["author"] = new_name
        participants = []
        for participant in thread.get("participants", []):
            renamed = new_name if participant == old_name else participant
            if renamed not in participants:
                participants.append(renamed)
        thread["participants"] = participants
        for comment in thread.get("comments", []):
            if comment.get("author") == old_name:
                comment["author"] = new_name
    names = new_doc.setdefault("availableNames", [])
    if new_name not in names:
        names.append(new_name)
    return new_doc


def display_name(viewer, thread_author, comment_author):
    """Return the label shown for a comment in the thread-detail view.

    The thread author sees every real name. Everyone else sees their own
    comments as ``you``, the thread author's as ``author`` and the rest as
    ``anonymous``.
    """
    if viewer == thread_author:
        return comment_author
    if comment_author == viewer:
        return YOU_LABEL
    if comment_author == thread_author:
        return AUTHOR_LABEL
    return ANONYMOUS_LABEL


def document_stats(doc):
    """Summarize document contents for the admin panel."""
    threads = doc["threads"]
    return {
        "threads": len(threads),
        "comments": sum(len(t.get("comments", [])) for t in threads),
        "available_names": len(doc.get("availableNames") or []),
        "authors": len({t.get("author") for t in threads}),
    }
