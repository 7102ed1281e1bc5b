import json
import logging
import typer
from pathlib import Path
from .core.output import OutputFormat

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
):
    """
    読み替え規定文から読み替え前後の文言を取り出す。
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def analyze(
    work: Path = typer.Option(..., "--work", "-w", help="Directory containing law XML files"),
    index_file: Path = typer.Option(..., "--index-file", "-i", help="Law index JSON (num / file)"),
    output: Path = typer.Option(..., "--output", "-o", help="Output file for extracted rules"),
    error_output: Path = typer.Option(..., "--error-output", "-e", help="Output file for provisions that failed"),
    output_format: OutputFormat = typer.Option(OutputFormat.JSON, "--format", help="json or jsonl"),
):
    """
    Analyze law XML files in a local work directory.
    """
    from .core.analyzer import YomikaeAnalyzer, iter_index_sources, load_index

    total = len(load_index(index_file))
    analyzer = YomikaeAnalyzer()
    report = analyzer.run(iter_index_sources(work, index_file), total=total)
    analyzer.write(output, error_output, output_format)
    typer.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))


@app.command()
def fetch(
    targets: Path = typer.Option(..., help="Path to targets.yaml (e-Gov law IDs)"),
    output: Path = typer.Option(..., "--output", "-o", help="Output file for extracted rules"),
    error_output: Path = typer.Option(..., "--error-output", "-e", help="Output file for provisions that failed"),
    output_format: OutputFormat = typer.Option(OutputFormat.JSON, "--format", help="json or jsonl"),
):
    """
    Fetch laws from the e-Gov API and analyze them.
    """
    from .client.egov import EGovClient
    from .core.analyzer import YomikaeAnalyzer, iter_egov_sources, load_targets

    law_ids = load_targets(targets)
    if not law_ids:
        raise typer.BadParameter(f"No targets found in {targets}")

    analyzer = YomikaeAnalyzer()
    report = analyzer.run(iter_egov_sources(EGovClient(), law_ids), total=len(law_ids))
    analyzer.write(output, error_output, output_format)
    typer.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))


@app.command()
def parse_sentence(text: str = typer.Argument(..., help="Yomikae sentence")):
    """
    Parse a single sentence and print the extracted rules as JSON.
    """
    from .core.errors import YomikaeError
    from .core.parser import parse_sentence as parse

    try:
        rules = parse(text)
    except YomikaeError as e:
        typer.echo(f"{e.kind.value}: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps([r.to_dict() for r in rules], ensure_ascii=False, indent=2))


if __name__ == "__main__":
    app()
