"""quiethn CLI: a quiet, cached front page of Hacker News."""

from __future__ import annotations

import asyncio
import logging

import click

from quiethn.config import settings


@click.group()
def cli():
    """quiethn: top Hacker News stories without the noise.

        \b
        serve.py serve              # Run the web server
        serve.py top                # Print the current top stories once
    """
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option("--port", default=settings.port, show_default=True, help="The port to start the web server on.")
@click.option("--num-stories", default=settings.num_stories, show_default=True, help="The number of top stories to display.")
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind.")
def serve(port, num_stories, host):
    """Serve the top stories over HTTP."""
    import uvicorn

    from quiethn.web import create_app

    app = create_app(settings.model_copy(update={"port": port, "num_stories": num_stories}))
    uvicorn.run(app, host=host, port=port)


@cli.command()
@click.option("--num-stories", default=settings.num_stories, show_default=True, help="The number of top stories to fetch.")
def top(num_stories):
    """Fetch the top stories once and print them."""
    from quiethn.errors import PipelineError
    from quiethn.hackernews import HackerNewsClient
    from quiethn.pipeline import fetch_top_stories

    async def _run():
        async with HackerNewsClient() as client:
            return await fetch_top_stories(client, num_stories)

    try:
        stories = asyncio.run(_run())
    except PipelineError as exc:
        raise click.ClickException(str(exc)) from exc

    for rank, story in enumerate(stories, start=1):
        click.echo(f"  {rank:>3}. {story.title[:70]}  ({story.host})")
    click.echo(f"\n{len(stories)} stories.")


if __name__ == "__main__":
    cli()
