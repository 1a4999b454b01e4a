from eventtrace.cli import app

app(prog_name="kn-event-trace")
