"""
Component Factory for the MailCorpus pipeline.

This module implements the factory pattern for creating pipeline components.
It uses registries to map configuration strings (e.g., 'rfc822') to the
actual component classes. Components are built once at startup and injected
into the pipeline.
"""

import logging
from ..components.parsers import EmailParser, UnstructuredParser
from ..components.tokenizers import StandardTokenizer, WhitespaceTokenizer
from ..components.sinks import LibSVMCorpusSink, RawCorpusSink

logger = logging.getLogger(__name__)

# A registry mapping 'type' strings to their corresponding Parser classes.
PARSER_REGISTRY = {"rfc822": EmailParser, "unstructured": UnstructuredParser}

# A registry mapping 'type' strings to their corresponding Tokenizer classes.
TOKENIZER_REGISTRY = {
    "standard": StandardTokenizer,
    "whitespace": WhitespaceTokenizer,
}

# A registry mapping 'type' strings to their corresponding Sink classes.
SINK_REGISTRY = {"libsvm": LibSVMCorpusSink, "raw": RawCorpusSink}


def build_component(component_config: dict, registry: dict):
    """
    Instantiates the class registered under `component_config["type"]`.

    The optional `config` mapping is passed as keyword arguments, so a key
    the class does not accept surfaces as a TypeError from its constructor.

    Raises:
        ValueError: If no type is given or no class is registered under it.
    """
    component_type = component_config.get("type", "")
    config = component_config.get("config", {}) or {}

    if not component_type:
        raise ValueError("Component 'type' not specified in configuration.")

    component_class = registry.get(component_type)
    if not component_class:
        raise ValueError(f"'{component_type}' is not a valid component type.")

    logger.debug(
        f"Building component '{component_class.__name__}' with config: {config}"
    )
    return component_class(**config)
