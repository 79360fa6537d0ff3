"""Route handlers for the board list, thread detail and admin views."""

import traceback

from flask import Blueprint, current_app, redirect, render_template, request, session

from board_client import BoardClient
from gateway import GatewayError
from view_state import InvalidTransition, View

bp = Blueprint('pages', __name__)

# Keys kept in the signed session cookie between requests.
_SESSION_USER = 'user_name'
_SESSION_VIEW = 'view'
_SESSION_THREAD = 'thread_id'


def _client():
    """Build a board client from the session and load the current document.

    :returns: Client for the acting user.
    :rtype: board_client.BoardClient
    :raises gateway.GatewayError: If the backend cannot produce a document.
    """
    client = BoardClient(
        current_app.config["BOARD_GATEWAY"],
        user_name=session.get(_SESSION_USER, ""),
        view=session.get(_SESSION_VIEW, View.LIST.value),
        selected_thread_id=session.get(_SESSION_THREAD),
        admin_password=current_app.config.get("ADMIN_PASSWORD"),
    )
    client.load()
    return client


def _remember(client):
    session[_SESSION_USER] = client.user_name
    session[_SESSION_VIEW] = client.view.value
    session[_SESSION_THREAD] = client.selected_thread_id


def _render(client, error=None, info_message=None, status=200):
    """Render whichever view the client is in."""
    template = 'pages/board.html'
    context = {}
    if client.view is View.ADMIN:
        template = 'pages/admin.html'
        context['stats'] = client.stats()
    elif client.view is View.DETAIL:
        thread = client.selected_thread
        if thread is None:
            # Thread vanished after a reset elsewhere.
            client.back()
            _remember(client)
        else:
            template = 'pages/thread.html'
            context['thread'] = thread
            context['comments'] = client.comment_views(thread)
    return (
        render_template(
            template,
            client=client,
            doc=client.document,
            error=error,
            info_message=info_message,
            **context,
        ),
        status,
    )


def _load_error(exc):
    traceback.print_exc()
    return render_template('pages/board.html', client=None, doc=None,
                           error=f'Error loading board: {exc}'), 500


@bp.route('/')
def index():
    """Render the current view for the session."""
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    return _render(client)


@bp.route('/name', methods=['POST'])
def choose_name():
    """Set the display name from the picker or a freshly typed name."""
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    name = request.form.get('new_name', '').strip() or request.form.get('selected_name', '')
    try:
        saved = client.set_name(name)
    except ValueError as exc:
        return _render(client, error=str(exc), status=400)
    if not saved:
        return _render(client, error='Failed to save data', status=500)
    _remember(client)
    return redirect('/')


@bp.route('/rename', methods=['POST'])
def rename():
    """Change the acting user's name, optionally rewriting past authorship."""
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    rewrite = request.form.get('rewrite_history') in {'1', 'on', 'yes', 'true'}
    try:
        saved = client.rename_user(request.form.get('new_name', ''), rewrite_history=rewrite)
    except (ValueError, PermissionError) as exc:
        return _render(client, error=str(exc), status=400)
    if not saved:
        return _render(client, error='Failed to save data', status=500)
    _remember(client)
    return redirect('/')


@bp.route('/threads', methods=['POST'])
def create_thread():
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    try:
        saved = client.create_thread(
            request.form.get('title', ''),
            request.form.get('description', ''),
        )
    except (ValueError, PermissionError) as exc:
        return _render(client, error=str(exc), status=400)
    if not saved:
        return _render(client, error='Failed to save data', status=500)
    return redirect('/')


@bp.route('/threads/<thread_id>')
def thread_detail(thread_id):
    """Open a thread the acting user participates in."""
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    if client.view is View.DETAIL and client.selected_thread_id == thread_id:
        return _render(client)
    if client.view is View.DETAIL:
        client.back()
    try:
        client.open_thread(thread_id)
    except LookupError as exc:
        return _render(client, error=str(exc), status=404)
    except (PermissionError, InvalidTransition) as exc:
        return _render(client, error=str(exc), status=403)
    _remember(client)
    return _render(client)


@bp.route('/threads/<thread_id>/join', methods=['POST'])
def join_thread(thread_id):
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    try:
        saved = client.join_thread(thread_id)
    except PermissionError as exc:
        return _render(client, error=str(exc), status=400)
    if not saved:
        return _render(client, error='Failed to save data', status=500)
    return redirect('/')


@bp.route('/threads/<thread_id>/comments', methods=['POST'])
def add_comment(thread_id):
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    try:
        saved = client.add_comment(thread_id, request.form.get('content', ''))
    except ValueError as exc:
        return _render(client, error=str(exc), status=400)
    except LookupError as exc:
        return _render(client, error=str(exc), status=404)
    except PermissionError as exc:
        return _render(client, error=str(exc), status=403)
    except GatewayError as exc:
        return _render(client, error=str(exc), status=500)
    if not saved:
        return _render(client, error='Failed to save data', status=500)
    return redirect(f'/threads/{thread_id}')


@bp.route('/back', methods=['POST'])
def back():
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    try:
        client.back()
    except InvalidTransition:
        pass
    _remember(client)
    return redirect('/')


@bp.route('/admin', methods=['POST'])
def admin_login():
    """Unlock the admin panel when the password matches."""
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    try:
        unlocked = client.unlock_admin(request.form.get('password', ''))
    except InvalidTransition as exc:
        return _render(client, error=str(exc), status=409)
    if not unlocked:
        return _render(client, error='Incorrect password', status=403)
    _remember(client)
    return redirect('/')


@bp.route('/admin/reset', methods=['POST'])
def admin_reset():
    """Delete every thread, comment and name after explicit confirmation."""
    try:
        client = _client()
    except GatewayError as exc:
        return _load_error(exc)
    if client.view is not View.ADMIN:
        return _render(client, error='Admin access required', status=403)
    confirmed = request.form.get('confirm') == 'yes'
    if not confirmed:
        return _render(client, info_message='Reset cancelled. Confirm to delete all data.')
    if not client.reset_all(confirmed=True):
        return _render(client, error='Failed to clear data', status=500)
    _remember(client)
    return redirect('/')
