from tokenregistry.cli import run

run()
