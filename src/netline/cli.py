import click
from flask import current_app
from flask.cli import with_appcontext

from netline.auth.utils import create_staff_user


def register_cli_commands(app):
    """
    Registers custom commands with the Flask CLI under the 'setup' and
    'live' groups. Called from create_app().
    """

    @app.cli.group()
    def setup():
        """Database initialization and staff accounts."""
        pass

    @setup.command("init-db")
    @with_appcontext
    def init_db_command():
        """Creates database tables from models."""
        from netline import db

        db.create_all()
        click.echo("Initialized the database.")

    @setup.command("create-admin")
    @with_appcontext
    @click.option("--username", prompt=True, help="Login name.")
    @click.option("--name", "complete_name", default=None, help="Display name.")
    @click.password_option()
    def create_admin_command(username, complete_name, password):
        """Creates a SYSTEM_ADMINISTRATOR account (dashboard access)."""
        from netline.models import RoleType

        _, created = create_staff_user(
            username, password, RoleType.SYSTEM_ADMINISTRATOR, complete_name
        )
        if created:
            click.echo(f"Administrator '{username}' created.")
        else:
            click.echo(f"User '{username}' already exists.")

    @setup.command("create-vendor")
    @with_appcontext
    @click.option("--username", prompt=True, help="Login name.")
    @click.option("--name", "complete_name", default=None, help="Display name.")
    @click.password_option()
    def create_vendor_command(username, complete_name, password):
        """Creates a VENDOR account (earns commission, no dashboard access)."""
        from netline.models import RoleType

        _, created = create_staff_user(username, password, RoleType.VENDOR, complete_name)
        if created:
            click.echo(f"Vendor '{username}' created.")
        else:
            click.echo(f"User '{username}' already exists.")

    @app.cli.group()
    def live():
        """Live presence feed."""
        pass

    @live.command("poll")
    @with_appcontext
    @click.option(
        "--interval",
        type=float,
        default=None,
        help="Seconds between snapshot requests (default: LIVE_POLL_INTERVAL).",
    )
    def poll_command(interval):
        """Requests connected-client snapshots until interrupted (Ctrl-C)."""
        from netline.live.poller import PresencePoller
        from netline.live.pubsub import LiveFeedNotConfigured, PubNubTransport
        from netline.live.service import load_snapshot

        try:
            transport = PubNubTransport.from_config(current_app.config)
        except LiveFeedNotConfigured as e:
            raise click.ClickException(str(e))

        app_obj = current_app._get_current_object()

        def on_notify(message):
            with app_obj.app_context():
                snapshot = load_snapshot()
            app_obj.logger.info(f"Presence snapshot: {len(snapshot)} connected")

        transport.listen(on_notify)
        poller = PresencePoller(
            transport.publish,
            interval=interval or current_app.config["LIVE_POLL_INTERVAL"],
        )
        click.echo(f"Polling every {poller.interval}s. Press Ctrl-C to stop.")
        try:
            poller.run()
        except KeyboardInterrupt:
            click.echo("Stopping poller.")
        finally:
            poller.stop()
            transport.close()
