from grok_search.cli import app

app(prog_name="grok-search")
