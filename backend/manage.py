import click

from cms import create_app

# Create an app instance
app = create_app()


@app.cli.command('init-storage')
def init_storage():
    """Create the document and image folders."""
    # create_app already makes the folders; report where they are
    click.echo(f"Documents: {app.config['DATA_FOLDER']}")
    click.echo(f"Images:    {app.config['IMAGE_FOLDER']}")
    click.echo("Done!")


@app.cli.command('create-user')
@click.argument('username')
@click.password_option()
def create_user(username, password):
    """Add USERNAME to the credentials file."""
    from cms.errors import CMSError

    try:
        app.extensions['cms.authenticator'].sign_up(username, password)
    except CMSError as e:
        raise click.ClickException(e.message)
    click.echo(f"Created user {username}")


if __name__ == '__main__':
    app.run(debug=True)
