"""CLI entry-point: one-shot generation and the API server."""

import asyncio
import time
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import typer
from rich.console import Console

from chatforge.config import get_settings
from chatforge.generate.mode import ThinkingMode
from chatforge.jobs.models import JobStatus
from chatforge.jobs.service import build_job_service

app = typer.Typer(help="Generate HTML artifacts from prompts via a browser chat session")


def resolve_prompt(arg: str) -> str:
    """Accept either a bare prompt or a chat URL carrying ?prompt=..."""
    if arg.startswith("http") and "prompt=" in arg:
        values = parse_qs(urlsplit(arg).query).get("prompt")
        if values and values[0].strip():
            return values[0]
    return arg


@app.command()
def generate(
    prompt: str = typer.Argument(..., envvar="PROMPT", help="Prompt text, or a chat URL with ?prompt=..."),
    output: str = typer.Option(None, help="Output directory (default: CHATFORGE_DATA_DIR/output)"),
    thinking: bool = typer.Option(True, "--thinking/--skip-thinking", help="Let the model think, or click Skip"),
    headless: bool = typer.Option(None, "--headless/--headed", help="Override CHATFORGE_HEADLESS"),
):
    """Run a single generation in the foreground and save the document."""
    console = Console()
    settings = get_settings()
    if headless is not None:
        settings = settings.model_copy(update={"chatforge_headless": headless})
    out_dir = Path(output) if output else settings.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)

    text = resolve_prompt(prompt)
    if not text.strip():
        console.print("[red]Error: prompt is empty[/red]")
        raise typer.Exit(1)

    service = build_job_service(settings)
    service.set_thinking_mode(ThinkingMode.ON if thinking else ThinkingMode.OFF)

    async def _run():
        submitted = service.submit(text)
        console.print(f"Target: {settings.chatforge_target_url}  job={submitted.job_id}")
        await service.drain()
        return service.get(submitted.job_id)

    job = asyncio.run(_run())
    if job.status is not JobStatus.READY:
        console.print(f"[red]Error: {job.error_message}[/red]")
        raise typer.Exit(1)

    code = job.artifact or ""
    out_path = out_dir / f"generated_{int(time.time() * 1000)}.html"
    out_path.write_text(code, encoding="utf-8")

    console.print("[green]Code saved successfully[/green]")
    console.print(f"File:   {out_path}")
    console.print(f"Length: {len(code)} characters")
    console.print("\nFirst 700 characters:\n", code[:700], markup=False)
    console.print("\n...\n")
    console.print("Last 400 characters:\n", code[-400:], markup=False)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(None, help="Port (default from PORT / settings)"),
    reload: bool = typer.Option(False, help="Auto-reload on code changes"),
):
    """Run the HTTP API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("backend.main:app", host=host, port=port or settings.port, reload=reload)


if __name__ == "__main__":
    app()
