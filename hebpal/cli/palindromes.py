"""
CLI for Hebrew palindrome scanning and AI discovery.
"""
import json
from pathlib import Path
from typing import List, Optional
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.progress import track

from ..common.config import settings
from ..common.errors import DiscoveryError, InvalidArgument
from ..common.log import setup_logging
from ..common.schemas import PalindromeResult, ScanReport
from ..pipeline.scanner import PalindromeScanner, select_maximal
from ..pipeline.ai_discovery import DiscoveryService


app = typer.Typer(help="Hebrew palindrome finder - scan text for letter sequences that read the same both ways")
console = Console()


@app.callback()
def main_options(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default from LOG_LEVEL)"),
):
    """Hebrew palindrome finder."""
    setup_logging(log_level)


def _make_scanner(min_length: Optional[int], max_length: Optional[int]) -> PalindromeScanner:
    lo = settings.PALINDROME_MIN_LENGTH if min_length is None else min_length
    hi = settings.PALINDROME_MAX_LENGTH if max_length is None else max_length
    try:
        return PalindromeScanner(lo, hi)
    except InvalidArgument as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(2)


def _run_scan(scanner: PalindromeScanner, text: str, maximal: bool) -> List[PalindromeResult]:
    results = scanner.scan(text)
    if maximal:
        results = select_maximal(results)
    return results


@app.command("scan")
def scan(
    text: str = typer.Argument(..., help="Text to scan"),
    min_length: Optional[int] = typer.Option(None, "--min", help="Minimum letters in a palindrome"),
    max_length: Optional[int] = typer.Option(None, "--max", help="Maximum letters in a palindrome"),
    maximal: bool = typer.Option(False, "--maximal", help="Only longest non-overlapping palindromes"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON lines"),
):
    """Scan a text and list the palindromes found, longest first."""
    scanner = _make_scanner(min_length, max_length)
    results = _run_scan(scanner, text, maximal)

    if as_json:
        for res in results:
            typer.echo(json.dumps(res.model_dump(), ensure_ascii=False))
        return

    if not results:
        console.print("[yellow]No palindromes found[/yellow]")
        return
    display_results(results)


@app.command("scan-file")
def scan_file(
    input_file: str = typer.Option(..., "--in", help="Input file path"),
    output_dir: str = typer.Option(..., "--out", help="Output directory"),
    min_length: Optional[int] = typer.Option(None, "--min", help="Minimum letters in a palindrome"),
    max_length: Optional[int] = typer.Option(None, "--max", help="Maximum letters in a palindrome"),
    maximal: bool = typer.Option(False, "--maximal", help="Only longest non-overlapping palindromes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output and DEBUG logging"),
):
    """Scan every line of a file and save the results as JSONL."""
    if verbose:
        setup_logging("DEBUG")

    # Validate paths
    input_path = Path(input_file)
    if not input_path.exists():
        console.print(f"[red]Error: Input file {input_file} not found[/red]")
        raise typer.Exit(1)

    scanner = _make_scanner(min_length, max_length)

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    with open(input_path, 'r', encoding='utf-8') as f:
        lines = [line.strip() for line in f if line.strip()]

    console.print(f"[green]Scanning {len(lines)} lines...[/green]")

    reports: List[ScanReport] = []
    for line in track(lines, description="Scanning...", console=console):
        results = _run_scan(scanner, line, maximal)
        reports.append(ScanReport(
            text=line,
            min_length=scanner.min_length,
            max_length=scanner.max_length,
            results=results,
        ))
        if verbose:
            console.print(f"\n[blue]Input:[/blue] {line}")
            longest = results[0].normalized if results else "-"
            console.print(f"[green]Palindromes:[/green] {len(results)} (longest: {longest})")

    report_file = output_path / "palindromes.jsonl"
    with open(report_file, 'w', encoding='utf-8') as f:
        for report in reports:
            f.write(json.dumps(report.model_dump(), ensure_ascii=False) + '\n')

    console.print(f"\n[green]Saved results to {report_file}[/green]")
    display_summary(reports)


@app.command("source")
def source(
    original: str = typer.Argument(..., help="Snippet to locate in the Tanakh"),
):
    """Identify the Tanakh source of a snippet via the LLM."""
    try:
        lookup = DiscoveryService().identify_source(original)
    except DiscoveryError as e:
        console.print(f"[red]Error communicating with the AI service: {e}[/red]")
        raise typer.Exit(1)

    if not lookup.found:
        console.print("[yellow]No exact biblical source found for this sequence.[/yellow]")
        return
    console.print(f"[green]Source:[/green] {lookup.reference()}")


@app.command("discover")
def discover(
    text: Optional[str] = typer.Option(None, "--text", help="Restrict discovery to this text"),
):
    """Ask the LLM for interesting palindromes in the Tanakh."""
    try:
        result = DiscoveryService().discover_palindromes(text)
    except DiscoveryError as e:
        console.print(f"[red]Error communicating with the AI service: {e}[/red]")
        raise typer.Exit(1)

    if not result.palindromes:
        console.print("[yellow]The AI service returned no palindromes[/yellow]")
        return

    table = Table(title="AI Discovered Palindromes")
    table.add_column("Text", style="bold")
    table.add_column("Source", style="cyan")
    table.add_column("Meaning", style="green")
    for item in result.palindromes:
        ref = " ".join(p for p in (item.book, item.chapter, item.verse) if p)
        table.add_row(item.text, ref, item.meaning or "")
    console.print(table)


@app.command("stats")
def show_stats(
    input_file: str = typer.Argument(..., help="palindromes.jsonl produced by scan-file")
):
    """Show statistics for a scan-file output."""

    path = Path(input_file)
    if not path.exists():
        console.print(f"[red]Error: File {input_file} not found[/red]")
        raise typer.Exit(1)

    reports: List[ScanReport] = []
    with open(path, 'r', encoding='utf-8') as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                reports.append(ScanReport.model_validate_json(line))
            except ValidationError as e:
                console.print(f"[red]Error: {input_file} line {lineno} is not a scan report[/red]")
                console.print(f"[red]{e.error_count()} validation error(s), first: {escape(e.errors()[0]['msg'])}[/red]")
                raise typer.Exit(1)

    display_summary(reports, title="Palindrome Statistics")


def display_results(results: List[PalindromeResult]):
    """Display scan results as a table."""
    table = Table(title=f"Palindromes ({len(results)})")
    table.add_column("Length", style="cyan", justify="right")
    table.add_column("Normalized", style="bold")
    table.add_column("Original", style="green")

    for res in results:
        table.add_row(str(res.length), res.normalized, res.original)

    console.print(table)


def display_summary(reports: List[ScanReport], title: str = "Scan Summary"):
    """Display processing summary."""
    total = sum(len(r.results) for r in reports)
    longest = max((res.length for r in reports for res in r.results), default=0)
    with_hits = sum(1 for r in reports if r.results)

    table = Table(title=title)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("Lines Scanned", str(len(reports)))
    table.add_row("Lines With Palindromes", str(with_hits))
    table.add_row("Total Palindromes", str(total))
    table.add_row("Longest", str(longest))
    table.add_row("Avg Palindromes/Line", f"{total/len(reports):.1f}" if reports else "0")

    console.print("\n")
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
