"""Run the ragbot chat: `python main.py` starts the REPL, subcommands as in `ragbot --help`."""

from ragbot.cli import cli


def main():
    cli()


if __name__ == "__main__":
    main()
