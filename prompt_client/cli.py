"""Command-line front end for browsing, submitting and voting on prompts."""

import asyncio
import sys
from typing import List, Optional

import typer
from typing_extensions import Annotated

from prompt_common.filters import parse_tag_param

from .api.client import APIError, CreatePromptRequest, PromptAPIClient, PromptResponse
from .config import get_settings
from .core.prompt_feed import PromptFeed, VoteOutcome
from .utils.logging import setup_logging
from .votes import VoteLedger

app = typer.Typer(help="Prompt Gallery - browse, submit and vote on AI prompts")


@app.callback()
def main(
    loglevel: Annotated[Optional[str], typer.Option("--loglevel", "-l", help="Logging level")] = None,
) -> None:
    setup_logging(loglevel or get_settings().log_level)


def _ledger() -> VoteLedger:
    return VoteLedger(get_settings().vote_ledger_path)


def _format_summary(prompt: PromptResponse, ledger: VoteLedger) -> str:
    vote = ledger.get_vote(prompt.id)
    marker = {"up": " [voted up]", "down": " [voted down]"}.get(vote or "", "")
    trending = " *trending*" if prompt.is_trending else ""
    return (
        f"{prompt.votes:>5}  {prompt.title} ({prompt.category}){trending}{marker}\n"
        f"       {prompt.description}\n"
        f"       tags: {', '.join(prompt.tags)}  by {prompt.author}  id: {prompt.id}"
    )


async def _list(search: str, tags: List[str], category: str) -> None:
    ledger = _ledger()
    async with PromptAPIClient() as client:
        feed = PromptFeed(client, ledger)
        feed.search_query = search
        feed.selected_tags = tags
        feed.set_category(category)
        await feed.refresh()

    if feed.notice:
        typer.secho(feed.notice, fg=typer.colors.YELLOW, err=True)

    prompts = feed.filtered_prompts
    if not prompts:
        typer.echo("No prompts found.")
        return
    for prompt in prompts:
        typer.echo(_format_summary(prompt, ledger))
    stats = feed.stats
    typer.echo(
        f"\n{stats.total} prompts, {stats.trending} trending, "
        f"{stats.total_votes} votes, {stats.categories} categories"
    )


@app.command("list")
def list_prompts(
    search: Annotated[str, typer.Option("--search", "-s", help="Text matched against title, description and tags")] = "",
    tags: Annotated[str, typer.Option("--tags", "-t", help="Comma-separated tags (any match)")] = "",
    category: Annotated[str, typer.Option("--category", "-c", help="image, video, text, code, automation or all")] = "all",
) -> None:
    """List prompts, newest first."""
    try:
        asyncio.run(_list(search, parse_tag_param(tags), category))
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        sys.exit(2)


async def _show(prompt_id: str) -> PromptResponse:
    async with PromptAPIClient() as client:
        return await client.get_prompt(prompt_id)


@app.command("show")
def show(prompt_id: Annotated[str, typer.Argument(help="Prompt id")]) -> None:
    """Show a single prompt including its full text."""
    try:
        prompt = asyncio.run(_show(prompt_id))
    except APIError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED, err=True)
        sys.exit(1)
    typer.echo(_format_summary(prompt, _ledger()))
    typer.echo(f"       created: {prompt.created_at.isoformat()}\n")
    typer.echo(prompt.content)


async def _submit(request: CreatePromptRequest) -> PromptResponse:
    async with PromptAPIClient() as client:
        return await client.create_prompt(request)


@app.command("submit")
def submit(
    title: Annotated[str, typer.Option("--title", help="Prompt title")],
    description: Annotated[str, typer.Option("--description", help="One-line summary")],
    content: Annotated[str, typer.Option("--content", help="The prompt text")],
    tags: Annotated[str, typer.Option("--tags", help="Comma-separated tags")],
    category: Annotated[str, typer.Option("--category", help="image, video, text, code or automation")] = "text",
    author: Annotated[Optional[str], typer.Option("--author", help="Display name")] = None,
) -> None:
    """Submit a new prompt."""
    request = CreatePromptRequest(
        title=title,
        description=description,
        content=content,
        category=category,
        tags=parse_tag_param(tags),
        author=author,
    )
    try:
        created = asyncio.run(_submit(request))
    except APIError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED, err=True)
        sys.exit(1)
    typer.secho(f"Created prompt {created.id}", fg=typer.colors.GREEN)


async def _vote(prompt_id: str, direction: str) -> VoteOutcome:
    async with PromptAPIClient() as client:
        feed = PromptFeed(client, _ledger())
        return await feed.vote(prompt_id, direction)


@app.command("vote")
def vote(
    prompt_id: Annotated[str, typer.Argument(help="Prompt id")],
    direction: Annotated[str, typer.Argument(help="up or down")],
) -> None:
    """Vote a prompt up or down. Each prompt can be voted on once."""
    if direction not in ("up", "down"):
        typer.secho("direction must be 'up' or 'down'", fg=typer.colors.RED, err=True)
        sys.exit(2)

    outcome = asyncio.run(_vote(prompt_id, direction))
    if outcome == VoteOutcome.ALREADY_VOTED:
        typer.secho("You have already voted on this prompt", fg=typer.colors.YELLOW, err=True)
        sys.exit(1)
    if outcome == VoteOutcome.REVERTED:
        typer.secho("Vote failed", fg=typer.colors.RED, err=True)
        sys.exit(1)
    typer.secho(f"Voted {direction}", fg=typer.colors.GREEN)


async def _health() -> dict:
    async with PromptAPIClient() as client:
        return await client.health_check()


@app.command("health")
def health() -> None:
    """Check the prompt service."""
    try:
        status = asyncio.run(_health())
    except APIError as e:
        typer.secho(f"Service unreachable: {e.message}", fg=typer.colors.RED, err=True)
        sys.exit(1)
    typer.echo(f"status: {status.get('status')}  redis: {status.get('redis')}")


if __name__ == "__main__":
    app()
