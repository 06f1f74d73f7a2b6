from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, IntPrompt

from quiz_engine.config import Settings, load_settings
from quiz_engine.loaders import ContentLoader, available_sources, create_loader
from quiz_engine.loaders.factory import SOURCE_DESCRIPTIONS
from quiz_engine.models import Screen
from quiz_engine.session import QuizSessionEngine, format_summary, quiz_to_markdown, summarize
from quiz_engine.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Play multiple-choice quizzes loaded from XML or JSON sources.")
console = Console()
log = get_logger(__name__)


def _load_settings(config: Optional[Path]) -> Settings:
    """Read settings and configure logging from them."""
    try:
        settings = load_settings(config)
    except (FileNotFoundError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config") from exc
    configure_logging(settings.logging.level, settings.logging.use_json)
    return settings


def _build_loader(source: str, settings: Settings) -> ContentLoader:
    try:
        return create_loader(source, settings)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--source") from exc


async def _load(engine: QuizSessionEngine, loader: ContentLoader) -> None:
    engine.request_load(loader)
    with console.status(f"Loading {loader.label}..."):
        await engine.wait_for_load()


def _play_questions(engine: QuizSessionEngine) -> None:
    """Prompt for each question until the session reaches the result screen."""
    while engine.state.screen is Screen.IN_PROGRESS:
        state = engine.state
        question = state.current_question
        console.print(
            f"\n[bold]Question {state.current_index + 1}/{state.total_questions}[/bold]"
        )
        console.print(question.question, markup=False)
        for idx, option in enumerate(question.options, start=1):
            console.print(f"  {idx}. {option}", markup=False)
        while not engine.can_advance():
            choice = IntPrompt.ask("Your answer", console=console)
            if not engine.select_answer(choice - 1):
                console.print(f"[red]Pick a number between 1 and {len(question.options)}.[/red]")
        engine.advance()


@app.command()
def play(
    source: str = typer.Option("markup", help="Quiz source: " + ", ".join(available_sources())),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """
    Run an interactive quiz session in the terminal.

    Loads the quiz through the selected loader, asks each question in turn, prints the
    score summary and offers to replay the same quiz. Exits with status 1 when the
    quiz cannot be loaded.
    """
    settings = _load_settings(config)
    loader = _build_loader(source, settings)
    engine = QuizSessionEngine()

    asyncio.run(_load(engine, loader))
    if engine.state.screen is Screen.ERROR:
        console.print(f"[red]{escape(engine.state.error_message)}[/red]")
        raise typer.Exit(code=1)
    if engine.state.screen is not Screen.IN_PROGRESS:
        console.print("[red]Loading did not finish.[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]{escape(engine.state.quiz.title)}[/bold]")
    while True:
        _play_questions(engine)
        summary = summarize(engine.state)
        log.info("session_completed", title=summary.title, score=summary.score)
        console.print("\n[bold]Result[/bold]")
        console.print(format_summary(summary), markup=False, highlight=False)
        if not Confirm.ask("Play again?", default=False, console=console):
            break
        engine.restart()
    engine.back_to_menu()


@app.command()
def show(
    source: str = typer.Option("markup", help="Quiz source: " + ", ".join(available_sources())),
    config: Optional[Path] = typer.Option(None, help="Path to configuration YAML."),
):
    """Load a quiz and print it as markdown, answer key included."""
    settings = _load_settings(config)
    loader = _build_loader(source, settings)
    engine = QuizSessionEngine()

    asyncio.run(_load(engine, loader))
    state = engine.state
    if state.screen is Screen.ERROR:
        console.print(f"[red]{escape(state.error_message)}[/red]")
        raise typer.Exit(code=1)
    console.print(quiz_to_markdown(state.quiz), markup=False, highlight=False)


@app.command()
def sources():
    """List the quiz sources that can be loaded."""
    for name in available_sources():
        console.print(f"{name}: {SOURCE_DESCRIPTIONS[name]}", highlight=False)


if __name__ == "__main__":
    app()
