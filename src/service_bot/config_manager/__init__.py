from .main import Config, ServerConfig
from .knowledge_base import KnowledgeBaseConfig
from .utils import read_yaml, validate_config, load_config

__all__ = [
    "Config",
    "ServerConfig",
    "KnowledgeBaseConfig",
    "read_yaml",
    "validate_config",
    "load_config",
]
