import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from app.lib.logger import configure_logger

logger = configure_logger(__name__)

load_dotenv()


@dataclass
class HiroConfig:
    """Hiro indexing API endpoints and client behaviour."""

    mainnet_url: str = os.getenv("EXPLAINER_HIRO_MAINNET_URL", "https://api.hiro.so")
    testnet_url: str = os.getenv(
        "EXPLAINER_HIRO_TESTNET_URL", "https://api.testnet.hiro.so"
    )
    api_key: str = os.getenv("HIRO_API_KEY", "")
    request_timeout: float = float(os.getenv("EXPLAINER_REQUEST_TIMEOUT", "15"))
    max_retries: int = int(os.getenv("EXPLAINER_MAX_RETRIES", "3"))
    retry_delay: float = float(os.getenv("EXPLAINER_RETRY_DELAY", "1"))


@dataclass
class DecoderConfig:
    """Raw transaction decoder service.

    Decoding is disabled when no URL is configured.
    """

    api_url: str = os.getenv("EXPLAINER_DECODER_API_URL", "")
    timeout: float = float(os.getenv("EXPLAINER_DECODER_TIMEOUT", "10"))


@dataclass
class ExplainConfig:
    default_network: str = os.getenv("EXPLAINER_DEFAULT_NETWORK", "auto")
    wallet_story_limit: int = int(os.getenv("EXPLAINER_WALLET_STORY_LIMIT", "20"))
    include_confirmations: bool = (
        os.getenv("EXPLAINER_INCLUDE_CONFIRMATIONS", "true").lower() == "true"
    )


@dataclass
class ServerConfig:
    cors_origins: List[str] = field(
        default_factory=lambda: [
            origin.strip()
            for origin in os.getenv(
                "EXPLAINER_CORS_ORIGINS", "http://localhost:3000"
            ).split(",")
            if origin.strip()
        ]
    )
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))


@dataclass
class Config:
    hiro: HiroConfig = field(default_factory=HiroConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)
    explain: ExplainConfig = field(default_factory=ExplainConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def load(cls) -> "Config":
        """Load and validate configuration"""
        config = cls()
        if config.explain.default_network not in ("auto", "mainnet", "testnet"):
            logger.warning(
                "Unknown default network, falling back to auto",
                extra={"network": config.explain.default_network},
            )
            config.explain.default_network = "auto"
        logger.info("Configuration loaded successfully")
        return config


# Global configuration instance
config = Config.load()
