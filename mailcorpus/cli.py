"""
Command-Line Interface for MailCorpus.
"""

import typer
import logging
from pathlib import Path
from typing import Optional
from typing_extensions import Annotated

from .core.errors import CorpusWriteError, PipelineSetupError
from .core.pipeline import run_pipeline
from .core.factory import PARSER_REGISTRY, TOKENIZER_REGISTRY, SINK_REGISTRY
from .utils.report import load_report


logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Turns a directory of labeled emails into a training corpus.")


@app.command()
def run(
    input_dir: Annotated[
        str, typer.Argument(help="Root directory; one sub-directory per label.")
    ],
    output_dir: Annotated[
        str, typer.Argument(help="Directory receiving the training corpus.")
    ],
    config_path: Optional[str] = typer.Option(
        None,
        "-c",
        "--config",
        help="Optional pipeline YAML configuration. Defaults are used without it.",
    ),
):
    """Builds a training corpus from a directory tree of emails."""
    try:
        report = run_pipeline(input_dir, output_dir, config_path=config_path)
    except PipelineSetupError as e:
        logger.error(f"Pipeline setup failed: {e}")
        raise typer.Exit(code=1)
    except CorpusWriteError as e:
        logger.error(f"Could not write the training corpus: {e}")
        raise typer.Exit(code=1)

    print(f"\nDocuments added: {report.processed}")
    print(f"Files failed:    {report.failed}")


@app.command()
def init():
    """Writes a default 'pipeline.yaml' in the current directory."""
    config_file = Path("pipeline.yaml")
    if config_file.exists():
        logger.warning("'pipeline.yaml' already exists.")
        return

    DEFAULT_YAML_CONTENT = """# Default MailCorpus Pipeline Configuration
content_type: message/rfc822

parser:
  type: rfc822
  config:
    require_headers: true

tokenizer:
  type: standard
  config:
    stop_words: english

sink:
  type: libsvm
  config:
    weighting: tfidf
"""
    config_file.write_text(DEFAULT_YAML_CONTENT.strip() + "\n")
    logger.info("Created default 'pipeline.yaml'.")


@app.command()
def status(
    output_dir: Annotated[
        str, typer.Argument(help="Output directory of a previous run.")
    ],
):
    """Shows the report of the last run into an output directory."""
    report = load_report(Path(output_dir))
    if report is None:
        logger.warning("No run report found. Run the pipeline first.")
        return

    print("\n--- Last Run ---")
    print(f"  started:   {report.started_at}")
    print(f"  finished:  {report.finished_at}")
    print(f"  documents: {report.processed}")
    print(f"  failed:    {report.failed}")
    for label, count in sorted(report.labels.items()):
        print(f"  - {label}: {count}")
    if report.failed_files:
        print("\n--- Failed Files ---")
        for path in report.failed_files:
            print(f"  - {path}")
    print("----------------")


@app.command(name="list-components")
def list_components():
    """Lists all available components."""
    logger.info("Listing available components...")

    def print_registry(title, registry):
        print(f"\n--- {title} ---")
        for name in sorted(registry.keys()):
            print(f"  - {name}")

    print_registry("Parsers", PARSER_REGISTRY)
    print_registry("Tokenizers", TOKENIZER_REGISTRY)
    print_registry("Sinks", SINK_REGISTRY)


if __name__ == "__main__":
    app()
