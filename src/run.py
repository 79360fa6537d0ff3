"""Development server for the idea board.

``BOARD_STORE`` picks the storage backend; ``PORT`` and ``FLASK_DEBUG``
control the local server.
"""

import os

from board import create_app

app = create_app()


def _debug_enabled():
    return os.getenv("FLASK_DEBUG", "0").strip().lower() in {"1", "true", "yes", "on"}


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "8080")), debug=_debug_enabled())
