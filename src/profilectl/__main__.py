from profilectl.cli import cli

cli()
