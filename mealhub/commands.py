import click
from mealhub.extensions import db
from mealhub.models.user import User
from mealhub.utils.auth_utils import hash_password


def register_commands(app):
    @app.cli.command("create-admin")
    @click.argument("email")
    @click.option("--first-name", default="Admin")
    @click.password_option()
    def create_admin(email, first_name, password):
        """Create an admin account, or promote an existing user."""
        email = email.strip().lower()
        user = User.query.filter_by(email=email).first()
        if user:
            user.role = "admin"
        else:
            user = User(
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                role="admin",
            )
            db.session.add(user)
        db.session.commit()
        click.echo(f"Admin ready: {user.email} ({user.id})")
