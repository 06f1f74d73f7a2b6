from __future__ import annotations

import logging
from typing import Dict, List

from quiz_engine.config.schema import Settings
from quiz_engine.loaders.base import ContentLoader
from quiz_engine.loaders.markup import MarkupQuizLoader, directory_reader, package_asset_reader
from quiz_engine.loaders.remote import RemoteQuizLoader, http_fetcher, simulated_fetcher

logger = logging.getLogger(__name__)

SOURCE_DESCRIPTIONS: Dict[str, str] = {
    "markup": "XML quiz document (bundled asset or local directory)",
    "remote": "JSON quiz served over HTTP (or the simulated sample)",
}


def available_sources() -> List[str]:
    """Return the loader names accepted by `create_loader`."""
    return list(SOURCE_DESCRIPTIONS)


def create_loader(source: str, settings: Settings) -> ContentLoader:
    """
    Instantiate the content loader for the named source.

    Parameters
    ----------
    source : str
        "markup" or "remote".
    settings : Settings
        Configuration supplying asset names, directories and endpoint details.

    Raises
    ------
    ValueError
        If the source name is unknown.
    """
    name = source.lower()
    if name == "markup":
        cfg = settings.markup
        reader = directory_reader(cfg.asset_dir) if cfg.asset_dir else package_asset_reader()
        logger.debug("Using markup loader for %s", cfg.asset_name)
        return MarkupQuizLoader(cfg.asset_name, reader, fallback_title=cfg.fallback_title)
    if name == "remote":
        cfg = settings.remote
        if cfg.simulate:
            fetch = simulated_fetcher(delay=cfg.simulated_delay_seconds)
        else:
            fetch = http_fetcher(timeout=cfg.timeout_seconds)
        logger.debug("Using remote loader for %s (simulate=%s)", cfg.url, cfg.simulate)
        return RemoteQuizLoader(cfg.url, fetch)
    raise ValueError(
        f"Unknown quiz source: {source}. Supported sources: {', '.join(available_sources())}"
    )
