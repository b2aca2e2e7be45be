from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from podium.main import main
    flask_app.register_blueprint(main)

    from podium.api.tournaments import tournaments
    flask_app.register_blueprint(tournaments, url_prefix='/api/tournaments')

    # Register Socket.IO event handlers
    from podium.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    @click.option('--no-seed', is_flag=True, help='Only recreate tables.')
    def db_reset_command(no_seed):
        """Drops, recreates, and seeds the database."""
        from podium.services.tournaments import engine
        from podium.services.tournaments.commands import get_store
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            if no_seed:
                click.echo('Database has been reset!')
                return

            # Seed a demo tournament with a few players in the lobby
            store = get_store()
            state = store.create(engine.new_tournament('Friday Night Karts', 4))
            for nickname in ['Alice', 'Bob', 'Cara']:
                state, _ = engine.join(state, nickname)
            state = store.save(state)
            click.echo(f'Database has been reset and seeded! Invite code: {state.invite_code}')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
