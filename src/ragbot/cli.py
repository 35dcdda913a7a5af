"""CLI for ragbot."""

import asyncio
import logging

import click

from ragbot.chat import build_chat_session, build_weather_tool
from ragbot.config import config
from ragbot.geo.resolver import ResolutionError
from ragbot.utils import configure_logging

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"


async def run_repl(session) -> None:
    """Read questions from stdin until 'exit' or end of input, printing each answer."""
    click.echo("AI Chatbot (RAG) - Type 'exit' to quit.")
    while True:
        try:
            line = click.prompt("Enter your question", default="", show_default=False)
        except click.Abort:
            # End of input
            click.echo()
            break

        line = line.strip()
        if not line:
            continue
        if line.lower() == EXIT_COMMAND:
            break

        try:
            answer = await session.ask(line)
        except Exception as e:
            logger.error(f"[repl] Error: {e}", exc_info=True)
            click.echo(f"Error: {e}")
            continue
        click.echo(f"AI: {answer}")

    click.echo("The chatbot has been stopped.")


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx):
    """Local chatbot with a cached weather tool. Starts the chat when no command is given."""
    configure_logging(config.log_level)
    if ctx.invoked_subcommand is None:
        ctx.invoke(chat)


@cli.command()
def chat():
    """Start the interactive chat against the local Ollama model."""
    session = build_chat_session()
    asyncio.run(run_repl(session))


@cli.command()
@click.argument("city")
def weather(city):
    """Print the current weather for CITY.

    Args:
        city: City name (positional argument)
    """
    tool = build_weather_tool()
    click.echo(asyncio.run(tool.get_weather(city)))


@cli.command()
@click.argument("city")
def resolve(city):
    """Print the coordinates for CITY using the cached resolver.

    Args:
        city: City name (positional argument)
    """
    resolver = build_weather_tool().resolver
    try:
        record = asyncio.run(resolver.resolve(city))
    except ResolutionError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"{city}: {record.latitude}, {record.longitude}")


if __name__ == "__main__":
    cli()
