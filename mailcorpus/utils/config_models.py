from pydantic import BaseModel, Field
from typing import Dict, Any


class ComponentConfig(BaseModel):
    """A model for a single component's configuration (parser, tokenizer, sink)"""

    type: str
    config: Dict[str, Any] = {}


class PipelineConfig(BaseModel):
    """The top-level model for the entire pipeline.yaml configuration."""

    parser: ComponentConfig = Field(
        default_factory=lambda: ComponentConfig(type="rfc822")
    )
    tokenizer: ComponentConfig = Field(
        default_factory=lambda: ComponentConfig(
            type="standard", config={"stop_words": "english"}
        )
    )
    sink: ComponentConfig = Field(
        default_factory=lambda: ComponentConfig(
            type="libsvm", config={"weighting": "tfidf"}
        )
    )
    content_type: str = "message/rfc822"
