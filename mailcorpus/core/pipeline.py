"""
Core pipeline orchestration module.

This module walks a directory tree of labeled mail files, turns every file
into a tokenized Document and hands it to a training corpus sink. Each file
takes the name of its parent directory as label; files directly under the
input root are ingested without a label. A file that fails is logged and
skipped, and the sink is always finalized once the traversal is over.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from ..utils.config import load_config
from .factory import (
    build_component,
    PARSER_REGISTRY,
    TOKENIZER_REGISTRY,
    SINK_REGISTRY,
)
from .errors import CorpusWriteError, FieldExtractionError, PipelineSetupError
from ..components.parsers import BaseParser
from ..components.tokenizers import BaseTokenizer
from ..components.sinks import BaseCorpusSink
from ..utils.data_models import Document
from ..utils.report import RunReport, save_report

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "message/rfc822"


@dataclass
class BuildResult:
    """Either the document built from a file or the reason it failed."""

    path: str
    document: Optional[Document] = None
    error: Optional[FieldExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def iter_corpus_files(root: Path) -> Iterator[Tuple[Path, Optional[str]]]:
    """
    Yields (file, label) pairs depth-first, children sorted by name.

    A file's label is the name of the directory holding it, or None when
    that directory is the root itself. A root that is a file yields itself
    with no label. A directory reached a second time through a symlink is
    skipped.
    """
    yield from _walk(Path(root), None, set(), is_root=True)


def _walk(node: Path, label: Optional[str], seen: set, is_root: bool = False):
    if not node.is_dir():
        yield node, label
        return

    try:
        real = node.resolve()
    except (OSError, RuntimeError) as e:
        logger.error(f"Cannot resolve directory '{node}': {e}", exc_info=True)
        return
    if real in seen:
        logger.warning(f"Skipping '{node}': directory '{real}' was already visited.")
        return
    seen.add(real)

    child_label = None if is_root else node.name
    try:
        children = sorted(node.iterdir())
    except OSError as e:
        logger.error(f"Cannot list directory '{node}': {e}", exc_info=True)
        return

    for child in children:
        yield from _walk(child, child_label, seen)


class CorpusIngestionPipeline:
    """
    Builds labeled documents from a directory tree and feeds them to a sink.

    The parser, tokenizer and sink are built by the caller and injected.
    """

    def __init__(
        self,
        parser: BaseParser,
        tokenizer: BaseTokenizer,
        sink: BaseCorpusSink,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ):
        self.parser = parser
        self.tokenizer = tokenizer
        self.sink = sink
        self.content_type = content_type

    def extract_field(self, raw_text: Optional[str]) -> Optional[List[str]]:
        """Tokenizes raw text. None stays None; empty text gives []."""
        if raw_text is None:
            return None
        return self.tokenizer.tokenize(raw_text)

    def build_document(self, path: Path, label: Optional[str]) -> BuildResult:
        """
        Parses and tokenizes one file.

        Fields whose raw text is missing are left out of the document. Any
        read, parse or tokenization failure is returned in the result rather
        than raised.
        """
        try:
            with open(path, "rb") as stream:
                parsed = self.parser.parse(stream, self.content_type)

            fields = {}
            for name, raw_text in parsed.raw_fields().items():
                tokens = self.extract_field(raw_text)
                if tokens is not None:
                    fields[name] = tokens
        except Exception as e:
            return BuildResult(path=str(path), error=FieldExtractionError(path, e))

        document = Document(label=label, fields=fields, metadata={"source": str(path)})
        return BuildResult(path=str(path), document=document)

    def _ingest_file(self, path: Path, label: Optional[str], report: RunReport):
        result = self.build_document(path, label)
        if not result.ok:
            logger.error(
                f"Skipping file '{path}': {result.error.cause}",
                exc_info=result.error.cause,
            )
            report.record_failure(result.path)
            return

        try:
            self.sink.append(result.document)
        except CorpusWriteError as e:
            logger.error(f"Could not store document for '{path}': {e}", exc_info=True)
            report.record_failure(result.path)
            return

        report.record_success(label)
        logger.debug(
            f"Added '{path}' with label '{label}' and fields {list(result.document.fields)}"
        )

    def run(self, root: Path) -> RunReport:
        """
        Ingests every file under root, then finalizes the sink and saves its
        lexicon, each exactly once.

        Returns:
            RunReport: How many files became documents and which ones failed.
        """
        root = Path(root)
        logger.info(f"Ingesting corpus from '{root}' as '{self.content_type}'")
        report = RunReport()

        for path, label in iter_corpus_files(root):
            self._ingest_file(path, label, report)

        logger.info(f"Finalizing sink: {self.sink.__class__.__name__}")
        try:
            self.sink.finalize()
        finally:
            self.sink.lexicon.save()
        report.finish()

        logger.info(
            f"Ingestion finished: {report.processed} documents added, {report.failed} files failed."
        )
        if report.failed:
            logger.warning(f"{report.failed} files could not be ingested; see errors above.")
        return report


def _build_components(config: dict, output_dir: str) -> tuple:
    """Builds the parser, tokenizer and sink based on the configuration."""
    logger.info("Building pipeline components...")
    try:
        parser = build_component(config["parser"], PARSER_REGISTRY)
        tokenizer = build_component(config["tokenizer"], TOKENIZER_REGISTRY)
        sink_config = dict(config["sink"])
        sink_config["config"] = {**(sink_config.get("config") or {}), "output_dir": output_dir}
        sink = build_component(sink_config, SINK_REGISTRY)
        logger.info("All components built successfully.")
        return parser, tokenizer, sink
    except (ValueError, KeyError, TypeError, OSError) as e:
        logger.error(f"Error building components: {e}", exc_info=True)
        raise PipelineSetupError(f"Could not build pipeline components: {e}") from e


def run_pipeline(
    input_dir: str, output_dir: str, config_path: Optional[str] = None
) -> RunReport:
    """
    Runs the whole ingestion from the command-line arguments.

    Raises:
        PipelineSetupError: If the configuration, the input directory or a
            component cannot be set up. Nothing is ingested in that case.
    """
    logger.info(f"MailCorpus pipeline starting: '{input_dir}' -> '{output_dir}'")

    config = load_config(config_path)
    input_path = Path(input_dir)
    if not input_path.exists():
        logger.error(f"Input path '{input_path}' does not exist.")
        raise PipelineSetupError(f"Input path not found: '{input_path}'")

    parser, tokenizer, sink = _build_components(config, output_dir)
    pipeline = CorpusIngestionPipeline(
        parser, tokenizer, sink, content_type=config.get("content_type", DEFAULT_CONTENT_TYPE)
    )
    report = pipeline.run(input_path)
    save_report(report, Path(output_dir))

    logger.info("MailCorpus pipeline completed.")
    return report
