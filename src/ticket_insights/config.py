"""Runtime configuration loaded from the environment and .env file."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()


@dataclass
class Settings:
    """Settings shared by the loader, the completion client and the CLI."""
    api_key: str | None = field(default_factory=lambda: os.getenv("ANTHROPIC_API_KEY"))
    model: str = field(default_factory=lambda: os.getenv("TICKET_INSIGHTS_MODEL", "claude-haiku-4-5"))
    log_level: str = field(default_factory=lambda: os.getenv("TICKET_INSIGHTS_LOG_LEVEL", "INFO"))
    max_search_depth: int = field(
        default_factory=lambda: int(os.getenv("TICKET_INSIGHTS_MAX_DEPTH", "32"))
    )
    output_dir: Path = field(
        default_factory=lambda: Path(os.getenv("TICKET_INSIGHTS_OUTPUT_DIR", "reports"))
    )

    def setup_logging(self) -> None:
        """Configure root logging once for CLI runs."""
        logging.basicConfig(
            level=getattr(logging, self.log_level.upper(), logging.INFO),
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


settings = Settings()
