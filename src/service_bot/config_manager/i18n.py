"""Multilingual field descriptions for configuration models."""

from typing import ClassVar, Dict, Optional

from pydantic import BaseModel


class Description(BaseModel):
    """A field description in several languages."""

    en: str
    zh: Optional[str] = None

    def get_text(self, lang_code: str = "en") -> str:
        if lang_code == "zh" and self.zh:
            return self.zh
        return self.en


class I18nMixin:
    """Adds lookup of `DESCRIPTIONS` entries to a config model."""

    DESCRIPTIONS: ClassVar[Dict[str, Description]] = {}

    @classmethod
    def get_field_description(cls, field_name: str, lang_code: str = "en") -> Optional[str]:
        description = cls.DESCRIPTIONS.get(field_name)
        return description.get_text(lang_code) if description else None
