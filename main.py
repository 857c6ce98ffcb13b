import uvicorn

from core.config_manager import load_config
from core.logger import get_logger, setup_logging


def main():
    """Main entry point for cm-gpt-service."""
    setup_logging()
    config = load_config()

    get_logger().info(
        "cm-gpt-service listening on :%d (mode=%s, default_model=%s, allowed=%s)",
        config.port,
        config.model_mode,
        config.default_model,
        list(config.allowed_origins),
    )

    uvicorn.run(
        "web.backend.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=config.reload,
        reload_dirs=["web", "core"] if config.reload else None,
    )


if __name__ == "__main__":
    main()
