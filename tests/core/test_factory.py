import pytest
from mailcorpus.core.factory import (
    build_component,
    PARSER_REGISTRY,
    TOKENIZER_REGISTRY,
    SINK_REGISTRY,
)
from mailcorpus.components.parsers import EmailParser
from mailcorpus.components.tokenizers import StandardTokenizer, WhitespaceTokenizer
from mailcorpus.components.sinks import LibSVMCorpusSink


def test_build_parser_component():
    """Tests if the factory correctly builds a parser component."""
    config = {"type": "rfc822", "config": {"require_headers": False}}
    component = build_component(config, PARSER_REGISTRY)
    assert isinstance(component, EmailParser)
    assert component.require_headers is False


def test_build_tokenizer_component():
    """Tests if the factory correctly builds a tokenizer component."""
    config = {"type": "standard", "config": {"stop_words": None}}
    component = build_component(config, TOKENIZER_REGISTRY)
    assert isinstance(component, StandardTokenizer)


def test_build_component_without_config():
    """Tests that a missing 'config' key builds with default arguments."""
    component = build_component({"type": "whitespace"}, TOKENIZER_REGISTRY)
    assert isinstance(component, WhitespaceTokenizer)


def test_build_sink_component(tmp_path):
    """Tests if the factory correctly builds a sink component."""
    config = {
        "type": "libsvm",
        "config": {"output_dir": str(tmp_path), "weighting": "tfidf"},
    }
    component = build_component(config, SINK_REGISTRY)
    assert isinstance(component, LibSVMCorpusSink)
    component.finalize()


def test_build_component_invalid_type():
    """Tests if the factory raises a ValueError for an invalid component type."""
    config = {"type": "invalid_type", "config": {}}
    with pytest.raises(ValueError):
        build_component(config, PARSER_REGISTRY)


def test_build_component_missing_type():
    with pytest.raises(ValueError):
        build_component({"config": {}}, TOKENIZER_REGISTRY)
