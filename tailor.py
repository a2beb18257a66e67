#!/usr/bin/env python3
"""Resume Tailor - score and tailor a resume against a job description."""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from config_loader import get_export_filename, load_config
from services import ExportService, ResumeTailorError, WorkflowService
from services.models import JobMetadata, Notification, OutputFormat, Severity
from services.workflow_service import format_score

console = Console()


HELP_TEXT = """
Resume Tailor - score and tailor a resume against a job description

WORKFLOW:
  1. Upload resume        (PDF, DOC, DOCX or TXT)
  2. Save job description (text file or inline text)
  3. Get ATS score        (>= 70 is a good match)
  4. Tailor resume        (rewritten by the remote service)
  5. Export               (paginated PDF and/or DOCX)

COMMANDS:
  ping     Check whether the tailoring service is reachable
  run      Run the whole workflow in one session
  export   Paginate a local text file into a PDF/DOCX

EXAMPLES:
  tailor ping
  tailor run resume.pdf --job-file jd.txt
  tailor run resume.docx --job-file jd.txt --title "Backend Engineer" --no-tailor
  tailor run resume.pdf --job-text "Hiring Java developer..." --export out/resume.pdf --format both
  tailor export tailored.txt --output tailored-resume.pdf

Set RESUME_TAILOR_API_BASE to point at a different service.
"""

SEVERITY_STYLES = {
    Severity.SUCCESS: "green",
    Severity.INFO: "blue",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}

FORMAT_CHOICES = click.Choice([f.value for f in OutputFormat])


def _print_notification(notification: Notification) -> None:
    style = SEVERITY_STYLES[notification.severity]
    console.print(Text(notification.message, style=style))


def _create_services(config, client=None):
    """Create service instances sharing one remote client."""
    return {
        "workflow": WorkflowService(config=config, client=client, listener=_print_notification),
        "export": ExportService(config=config),
    }


@click.group(help=HELP_TEXT)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx, verbose: bool):
    """Resume Tailor - score and tailor a resume against a job description."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.ensure_object(dict)
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config()
    ctx.obj["services"] = _create_services(ctx.obj["config"], ctx.obj.get("client"))


# ============================================================================
# Service Commands
# ============================================================================


@cli.command()
@click.pass_context
def ping(ctx):
    """Check whether the tailoring service is reachable."""
    svc = ctx.obj["services"]["workflow"]

    async def _ping():
        try:
            return await svc.check_health()
        finally:
            await svc.aclose()

    health = asyncio.run(_ping())
    style = "green" if health.ok else "red"
    console.print(f"AI: [{style}]{escape(health.status)}[/{style}]")
    if not health.ok:
        ctx.exit(1)


@cli.command()
@click.argument("resume", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--job-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="File containing the job description.")
@click.option("--job-text", type=str, help="Job description text.")
@click.option("--title", help="Job title (default from config).")
@click.option("--company", help="Company name (default from config).")
@click.option("--location", help="Job location.")
@click.option("--employment-type", help="Employment type, e.g. Full-time.")
@click.option("--experience-level", help="Experience level, e.g. Mid-level.")
@click.option("--score/--no-score", default=True, help="Fetch the ATS score.")
@click.option("--tailor/--no-tailor", "do_tailor", default=True, help="Request a tailored resume.")
@click.option("--export", "export_path", type=click.Path(dir_okay=False, path_type=Path), help="Export the tailored resume to this file.")
@click.option("--format", "output_format", type=FORMAT_CHOICES, default=None, help="Export format (default from config).")
@click.pass_context
def run(
    ctx,
    resume: Path,
    job_file: Path | None,
    job_text: str | None,
    title: str | None,
    company: str | None,
    location: str | None,
    employment_type: str | None,
    experience_level: str | None,
    score: bool,
    do_tailor: bool,
    export_path: Path | None,
    output_format: str | None,
):
    """Upload a resume, save a job description, score and tailor."""
    if bool(job_file) == bool(job_text):
        raise click.UsageError("Provide exactly one of --job-file or --job-text.")

    description = job_file.read_text() if job_file else job_text
    svc = ctx.obj["services"]["workflow"]

    overrides = {
        "title": title,
        "company": company,
        "location": location,
        "employment_type": employment_type,
        "experience_level": experience_level,
    }
    metadata = svc.job_defaults.model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )

    ok = asyncio.run(_run_workflow(svc, resume, description, metadata, score, do_tailor))

    session = svc.session
    if export_path and session.tailored_text:
        _export(ctx.obj["services"]["export"], session.tailored_text, export_path, output_format)

    if not ok:
        ctx.exit(1)


async def _run_workflow(
    svc: WorkflowService,
    resume: Path,
    description: str,
    metadata: JobMetadata,
    score: bool,
    do_tailor: bool,
) -> bool:
    """Drive the transitions in order; stop at the first hard failure."""
    try:
        console.print(f"\n[bold blue]Uploading resume: {escape(resume.name)}[/bold blue]")
        uploaded = await svc.upload_resume(resume)

        console.print("\n[bold blue]Saving job description...[/bold blue]")
        saved = await svc.save_job(description, metadata)

        if not (uploaded.ok and saved.ok):
            return False

        if score:
            console.print("\n[bold blue]Calculating ATS score...[/bold blue]")
            outcome = await svc.fetch_score()
            if not outcome.ok:
                return False
            _print_score_details(outcome.value)

        if do_tailor:
            console.print("\n[bold blue]Tailoring resume...[/bold blue]")
            with console.status("Waiting for the tailoring service..."):
                outcome = await svc.tailor()
            if not outcome.ok:
                return False
            if outcome.open_result:
                _print_tailored(outcome.value)

        return True
    finally:
        await svc.aclose()


def _print_score_details(result):
    """Display the optional ATS analysis."""
    if result.basic_score is not None or result.detailed_score is not None:
        basic = format_score(result.basic_score) if result.basic_score is not None else "-"
        detailed = format_score(result.detailed_score) if result.detailed_score is not None else "-"
        console.print(f"  [dim]Keyword score: {basic}  AI score: {detailed}[/dim]")

    if result.matching_keywords:
        console.print(f"  Matching: [green]{escape(', '.join(result.matching_keywords[:10]))}[/green]")
    if result.missing_keywords:
        console.print(f"  Missing: [yellow]{escape(', '.join(result.missing_keywords[:10]))}[/yellow]")
    if result.suggestions:
        console.print("\n[bold]Suggestions:[/bold]")
        for suggestion in result.suggestions[:5]:
            console.print(f"  - {escape(suggestion)}")


def _print_tailored(result):
    subtitle = f"ATS: {format_score(result.ats_score)}" if result.ats_score is not None else None
    console.print(Panel(
        Text(result.tailored_text or "No content"),
        title="Tailored Resume",
        subtitle=subtitle,
    ))


# ============================================================================
# Export Commands
# ============================================================================


@cli.command()
@click.argument("text_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Output file (default from config).")
@click.option("--format", "output_format", type=FORMAT_CHOICES, default=None, help="Export format (default from config).")
@click.pass_context
def export(ctx, text_file: Path, output: Path | None, output_format: str | None):
    """Paginate a local text file into a PDF/DOCX document."""
    svc = ctx.obj["services"]["export"]
    target = output or Path(get_export_filename(ctx.obj["config"]))
    if not _export(svc, text_file.read_text(), target, output_format):
        ctx.exit(1)


def _export(svc: ExportService, text: str, output: Path, output_format: str | None) -> bool:
    try:
        result = svc.export(text, output_path=output, output_format=output_format)
    except (ResumeTailorError, OSError) as e:
        console.print(f"[red]Export failed: {escape(str(e))}[/red]")
        return False

    for kind, path in result.artifacts.items():
        console.print(f"[green]{kind.upper()} saved to:[/green] {escape(path)}")
    console.print(f"[dim]{result.page_count} page(s), {result.line_count} line(s)[/dim]")
    return True


if __name__ == "__main__":
    cli()
