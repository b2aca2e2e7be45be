from flask_socketio import join_room, leave_room, emit
from podium import socketio


def _room(invite_code: str) -> str:
    return f"tournament:{invite_code.strip().upper()}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_tournament(data):
    invite_code = (data or {}).get('invite_code')
    if not invite_code:
        emit('error', {'message': 'invite_code is required'})
        return
    room = _room(invite_code)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_tournament(data):
    invite_code = (data or {}).get('invite_code')
    if not invite_code:
        emit('error', {'message': 'invite_code is required'})
        return
    room = _room(invite_code)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for ns in namespaces:
        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('join_tournament', handle_join_tournament, namespace=ns)
        socketio.on_event('leave_tournament', handle_leave_tournament, namespace=ns)
        socketio.on_event('ping', handle_ping, namespace=ns)
