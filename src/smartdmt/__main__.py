from smartdmt.cli import app

app(prog_name="smartdmt")
