# config_manager/main.py
from pydantic import BaseModel, Field
from typing import Dict, ClassVar

from .knowledge_base import KnowledgeBaseConfig
from .i18n import I18nMixin, Description


class ServerConfig(I18nMixin, BaseModel):
    """HTTP server settings."""

    host: str = Field("localhost", alias="host")
    port: int = Field(12393, alias="port", gt=0, lt=65536)

    DESCRIPTIONS: ClassVar[Dict[str, Description]] = {
        "host": Description(en="Server host address", zh="服务器主机地址"),
        "port": Description(en="Server port number", zh="服务器端口号"),
    }


class Config(I18nMixin, BaseModel):
    """
    Main configuration for the application.
    """

    server_config: ServerConfig = Field(
        default_factory=ServerConfig, alias="server_config"
    )
    knowledge_base: KnowledgeBaseConfig = Field(
        default_factory=KnowledgeBaseConfig, alias="knowledge_base"
    )

    DESCRIPTIONS: ClassVar[Dict[str, Description]] = {
        "server_config": Description(en="Server configuration settings", zh="服务器配置设置"),
        "knowledge_base": Description(en="Knowledge base settings", zh="知识库设置"),
    }
