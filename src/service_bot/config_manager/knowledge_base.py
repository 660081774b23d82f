"""
Configuration models for the knowledge base.
"""

from pydantic import BaseModel, Field
from typing import Dict, ClassVar
from .i18n import I18nMixin, Description


class KnowledgeBaseConfig(I18nMixin, BaseModel):
    """Configuration for the knowledge base."""

    question_max_length: int = Field(150, alias="question_max_length", gt=0)
    score_threshold: int = Field(1, alias="score_threshold", ge=0)
    default_category: str = Field("General", alias="default_category", min_length=1)
    ingestion_timeout_seconds: float = Field(
        60.0, alias="ingestion_timeout_seconds", gt=0
    )
    max_upload_bytes: int = Field(10 * 1024 * 1024, alias="max_upload_bytes", gt=0)

    DESCRIPTIONS: ClassVar[Dict[str, Description]] = {
        "question_max_length": Description(
            en="Paragraphs shorter than this many characters are treated as questions when segmenting documents (default: 150)",
            zh="分段文档时，短于此字符数的段落被视为问题（默认：150）",
        ),
        "score_threshold": Description(
            en="A match must score strictly above this value to be returned (default: 1)",
            zh="匹配分数必须严格高于此值才会返回（默认：1）",
        ),
        "default_category": Description(
            en="Category given to entries that appear before any heading (default: General)",
            zh="出现在任何标题之前的条目所使用的类别（默认：General）",
        ),
        "ingestion_timeout_seconds": Description(
            en="Maximum time allowed to convert and segment one document (default: 60)",
            zh="转换和分段单个文档的最长时间（默认：60秒）",
        ),
        "max_upload_bytes": Description(
            en="Maximum size of an uploaded document or JSON file (default: 10 MiB)",
            zh="上传文档或 JSON 文件的最大大小（默认：10 MiB）",
        ),
    }
