from mdsite.cli.cli import app

app()
