from driveseek.cli import cli

cli()
