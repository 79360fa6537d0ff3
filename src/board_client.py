"""Board application state driven against a storage gateway."""

# Approach: compute a new document, send the whole thing to the gateway, and
# only adopt it locally once the gateway reports success.
import documents
from store_config import get_admin_password
from view_state import Action, InvalidTransition, View, next_view


class BoardClient:
    """In-memory board state for one acting user.

    Writes are not serialized against other clients: two clients that read
    the same version and then save will silently drop the first save.
    """

    def __init__(self, gateway, user_name="", view=View.LIST, selected_thread_id=None,
                 admin_password=None):
        self.gateway = gateway
        self.document = documents.initial_document()
        self.user_name = user_name or ""
        self.view = View(view)
        self.selected_thread_id = selected_thread_id if self.view is View.DETAIL else None
        self.admin_password = admin_password if admin_password is not None else get_admin_password()

    @property
    def needs_name(self):
        return not self.user_name

    @property
    def selected_thread(self):
        if self.selected_thread_id is None:
            return None
        return documents.find_thread(self.document, self.selected_thread_id)

    def load(self):
        """Read the current document from the gateway."""
        self.document = self.gateway.read()
        return self.document

    def _save(self, new_doc):
        if not self.gateway.write(new_doc):
            print("Failed to save data")
            return False
        self.document = new_doc
        return True

    def _require_user(self):
        if not self.user_name:
            raise PermissionError("Choose a display name first")
        return self.user_name

    def set_name(self, name):
        """Adopt ``name`` as the acting user, recording it if it is new."""
        name = (name or "").strip()
        if not name:
            raise ValueError("name must not be empty")
        if not self._save(documents.add_available_name(self.document, name)):
            return False
        self.user_name = name
        return True

    def create_thread(self, title, description):
        author = self._require_user()
        return self._save(documents.create_thread(self.document, title, description, author))

    def join_thread(self, thread_id):
        user = self._require_user()
        return self._save(documents.join_thread(self.document, thread_id, user))

    def add_comment(self, thread_id, content):
        """Append a comment, starting from a fresh read of the document.

        Only participants of an existing thread may comment.

        :raises LookupError: If ``thread_id`` is not in the current document.
        :raises PermissionError: If the acting user has not joined the thread.
        """
        author = self._require_user()
        if not (content or "").strip():
            raise ValueError("content must not be empty")
        current = self.gateway.read()
        thread = documents.find_thread(current, thread_id)
        if thread is None:
            raise LookupError(f"Unknown thread {thread_id}")
        if author not in thread["participants"]:
            raise PermissionError("Join the thread before commenting")
        return self._save(documents.add_comment(current, thread_id, content, author))

    def rename_user(self, new_name, rewrite_history=False):
        """Change the acting user's display name.

        Without ``rewrite_history`` past threads and comments keep the old
        name. With it, the gateway rewrites authorship server-side.
        """
        old_name = self._require_user()
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValueError("new name must not be empty")
        if new_name == old_name:
            return True
        if rewrite_history:
            updated = self.gateway.rename_author(old_name, new_name)
            if updated is None:
                return False
            self.document = updated
        elif not self._save(documents.add_available_name(self.document, new_name)):
            return False
        self.user_name = new_name
        return True

    def open_thread(self, thread_id):
        thread = documents.find_thread(self.document, thread_id)
        if thread is None:
            raise LookupError(f"Unknown thread {thread_id}")
        if self.user_name not in thread["participants"]:
            raise PermissionError("Join the thread before opening it")
        self.view = next_view(self.view, Action.OPEN_THREAD)
        self.selected_thread_id = thread_id
        return thread

    def back(self):
        self.view = next_view(self.view, Action.BACK)
        self.selected_thread_id = None

    def unlock_admin(self, password):
        """Enter the admin view when ``password`` matches the shared secret."""
        if password != self.admin_password:
            return False
        self.view = next_view(self.view, Action.UNLOCK_ADMIN)
        return True

    def reset_all(self, confirmed=False):
        """Wipe every thread, comment and name. Requires ``confirmed``."""
        if self.view is not View.ADMIN:
            raise InvalidTransition("Reset is only available from the admin view")
        if not confirmed:
            return False
        if not self.gateway.reset():
            print("Failed to clear data")
            return False
        self.document = documents.initial_document()
        self.user_name = ""
        self.view = next_view(self.view, Action.RESET)
        return True

    def comment_views(self, thread):
        """Return the thread's comments with masked author labels for this viewer."""
        return [
            dict(comment, display_name=documents.display_name(
                self.user_name, thread["author"], comment["author"]))
            for comment in thread["comments"]
        ]

    def stats(self):
        return documents.document_stats(self.document)
