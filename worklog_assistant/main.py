"""
Main CLI interface for the Work Log Assistant.

This module provides the Typer-based command-line interface with commands for:
- Logging work described in text or a text file
- Logging work described in an audio file (Whisper transcription)
- An interactive session with typed or recorded voice input
"""

import json
import logging
import os
import sys
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .core.config import Config, ConfigError, load_env
from .core.pipeline import ExtractionError, WorkLogPipeline
from .core.progress import reporter
from .core.speech import SpeechError, SpeechProcessor, has_meaningful_content, record_audio
from .core.types import ProcessingReport

app = typer.Typer(
    name="worklog-assistant",
    help="Work Log Assistant CLI - Describe your work in plain language and log it to JIRA",
    no_args_is_help=True,
)

console = Console()
# Log records go to stderr so --format json output stays parseable
err_console = Console(stderr=True)


def _setup(debug: bool, env_file: Optional[str]) -> Config:
    """Load the environment, configure logging and validate required settings."""
    load_env(env_file)

    # CLI flag always overrides .env
    if debug:
        os.environ["WA_DEBUG"] = "1"
    elif os.environ.get("WA_DEBUG") != "1":
        os.environ["WA_DEBUG"] = "0"

    package_logger = logging.getLogger("worklog_assistant")
    package_logger.setLevel(logging.DEBUG if os.environ["WA_DEBUG"] == "1" else logging.WARNING)
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))

    config = Config()
    config.validate()
    return config


def _run_cycle(pipeline: WorkLogPipeline, text: str, output_format: str) -> ProcessingReport:
    """Process one user turn and display the outcome."""
    # Progress narration would corrupt machine-readable output
    status = reporter.initialize(console, "Processing your input…") if output_format != "json" else nullcontext()
    try:
        with status:
            report = pipeline.process(text)
    finally:
        reporter.reset()

    _display_report(report, output_format)
    return report


def _display_report(report: ProcessingReport, output_format: str) -> None:
    """Display a processing report in the specified format."""
    if output_format == "json":
        typer.echo(json.dumps(report.to_dict(), indent=2))
        return

    if report.is_empty:
        console.print("[yellow]No JIRA tickets identified in your input.[/yellow]")
        return

    for entry, outcome in zip(report.entries, report.outcomes):
        if outcome.success:
            console.print(f"✅ Successfully logged {escape(entry.time_spent)} to {escape(outcome.ticket_id)} on {entry.work_date.isoformat()}")
        else:
            console.print(f"❌ Failed to log work to {escape(outcome.ticket_id)}: {escape(outcome.error or 'unknown error')}")

    if report.failed:
        console.print(f"\n[bold]{len(report.succeeded)} logged, {len(report.failed)} failed[/bold]")


def _display_welcome() -> None:
    console.print("\n[bold]Welcome to JIRA Work Logger![/bold]")
    console.print("Enter your work details in natural language (e.g., 'I spent 2 hours on PROJ-123 fixing bugs'):")
    console.print("Type 'v' and press Enter to use voice input, or just start typing for text input")
    console.print("Type 'exit' to quit")


def _ask_for_typed_text() -> Optional[str]:
    if typer.confirm("Would you like to manually type what was said instead?", default=False):
        return typer.prompt("Please type what was said").strip() or None
    return None


def _capture_voice_input(config: Config, keep_audio: bool) -> Optional[str]:
    """Record a voice clip, transcribe it and return the text (or None to skip the turn)."""
    console.print(f"Recording... Speak now and press Ctrl+C when finished (max {config.max_recording_seconds} seconds)")
    try:
        audio_path = record_audio(config.recordings_dir, config.max_recording_seconds)
    except SpeechError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return None

    try:
        console.print("[dim]Transcribing audio with OpenAI Whisper...[/dim]")
        transcript = SpeechProcessor(config).transcribe_audio(str(audio_path))
    except SpeechError as e:
        console.print(f"[bold red]Speech recognition failed:[/bold red] {escape(str(e))}")
        console.print(f"The audio file has been preserved at: {audio_path}")
        return _ask_for_typed_text()

    if not has_meaningful_content(transcript.text):
        console.print(f'[yellow]Warning:[/yellow] Transcription returned minimal content: "{escape(transcript.text)}"')
        console.print(f"Audio might be too quiet or unclear. The audio file has been preserved at: {audio_path}")
        return _ask_for_typed_text()

    if not keep_audio:
        audio_path.unlink(missing_ok=True)
    console.print(f'Voice input: "{escape(transcript.text)}"')
    return transcript.text


@app.command()
def log(
    text: Optional[str] = typer.Option(None, "--text", "-t", help="Description of the work done"),
    file: Optional[str] = typer.Option(None, "--file", help="Path to file containing the work description"),
    output_format: str = typer.Option("rich", "--format", "-f", help="Output format (rich, json)"),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path to a .env file with credentials"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging and request traces"),
):
    """
    Log work described in natural language.

    Examples:
        worklog-assistant log --text "I spent 2 hours on PROJ-123 fixing bugs yesterday"
        worklog-assistant log --file standup.txt --format json
    """
    if text and file:
        console.print("[bold red]Error:[/bold red] Cannot specify both --text and --file options")
        sys.exit(1)

    if not text and not file:
        console.print("[bold red]Error:[/bold red] Must specify either --text or --file option")
        sys.exit(1)

    if file:
        file_path = Path(file)
        if not file_path.exists():
            console.print(f"[bold red]Error:[/bold red] File not found: {file}")
            sys.exit(1)
        text = file_path.read_text(encoding="utf-8")

    assert text is not None, "Text should not be None after validation"

    try:
        config = _setup(debug, env_file)
        with WorkLogPipeline.from_config(config) as pipeline:
            report = _run_cycle(pipeline, text.strip(), output_format)
    except ConfigError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except ExtractionError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]Unexpected Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    if report.failed:
        sys.exit(1)


@app.command("from-audio")
def from_audio(
    path: str = typer.Argument(..., help="Path to audio file"),
    output_format: str = typer.Option("rich", "--format", "-f", help="Output format (rich, json)"),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path to a .env file with credentials"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging and request traces"),
):
    """
    Transcribe an audio file with Whisper, then log the work it describes.

    Examples:
        worklog-assistant from-audio standup.wav
        worklog-assistant from-audio notes.m4a --format json
    """
    try:
        config = _setup(debug, env_file)

        audio_path = Path(path)
        if not audio_path.exists():
            console.print(f"[bold red]Error:[/bold red] Audio file not found: {path}")
            sys.exit(1)

        transcript = SpeechProcessor(config).transcribe_audio(path)
        if not has_meaningful_content(transcript.text):
            console.print(f'[bold red]Error:[/bold red] Transcription returned minimal content: "{escape(transcript.text)}"')
            sys.exit(1)

        if output_format != "json":
            console.print(f'[dim]Transcript:[/dim] "{escape(transcript.text)}"')

        with WorkLogPipeline.from_config(config) as pipeline:
            report = _run_cycle(pipeline, transcript.text, output_format)
    except ConfigError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except (SpeechError, ExtractionError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[bold red]Unexpected Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    if report.failed:
        sys.exit(1)


@app.command()
def interactive(
    keep_audio: bool = typer.Option(False, "--keep-audio", help="Keep voice recordings after successful transcription"),
    env_file: Optional[str] = typer.Option(None, "--env-file", help="Path to a .env file with credentials"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging and request traces"),
):
    """
    Start an interactive session: type work descriptions or record them by voice.
    """
    try:
        config = _setup(debug, env_file)
    except ConfigError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    with WorkLogPipeline.from_config(config) as pipeline:
        _display_welcome()
        while True:
            try:
                user_input = console.input("> ").strip()
            except (EOFError, KeyboardInterrupt):
                break

            if not user_input:
                continue
            if user_input.lower() == "exit":
                break
            if user_input.lower() == "v":
                user_input = _capture_voice_input(config, keep_audio)
                if not user_input:
                    _display_welcome()
                    continue

            try:
                _run_cycle(pipeline, user_input, "rich")
            except ExtractionError as e:
                console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")

            _display_welcome()


if __name__ == "__main__":
    app()
