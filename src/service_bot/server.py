"""Application factory and command-line entry point for the HTTP server."""

import argparse
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from .config_manager import Config, load_config
from .kb_routes import init_kb_routes
from .knowledge_base import KnowledgeBaseManager


def create_app(
    config: Optional[Config] = None,
    kb_manager: Optional[KnowledgeBaseManager] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application configuration (defaults if None)
        kb_manager: Knowledge base to serve (created from config if None)

    Returns:
        Configured FastAPI app
    """
    config = config or Config()
    kb_manager = kb_manager or KnowledgeBaseManager(config.knowledge_base)

    app = FastAPI(title="Service Bot")
    app.state.config = config
    app.state.kb_manager = kb_manager
    app.include_router(init_kb_routes(kb_manager))

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": "Service Bot API", "docs": "/docs"}

    return app


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Service Bot server")
    parser.add_argument("--config", default="conf.yaml", help="Path to YAML config")
    args = parser.parse_args()

    config = load_config(args.config)
    app = create_app(config)

    import uvicorn

    logger.info(
        f"Starting server on {config.server_config.host}:{config.server_config.port}"
    )
    uvicorn.run(app, host=config.server_config.host, port=config.server_config.port)


if __name__ == "__main__":
    main()
