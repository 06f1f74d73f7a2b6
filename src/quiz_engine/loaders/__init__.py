from .base import (
    ContentLoader,
    EmptyQuiz,
    LoadError,
    LoadErrorKind,
    MalformedContent,
    SourceUnavailable,
)
from .factory import available_sources, create_loader
from .markup import MarkupQuizLoader, directory_reader, package_asset_reader, parse_markup_quiz
from .remote import RemoteQuizLoader, http_fetcher, parse_remote_quiz, simulated_fetcher

__all__ = [
    "ContentLoader",
    "EmptyQuiz",
    "LoadError",
    "LoadErrorKind",
    "MalformedContent",
    "SourceUnavailable",
    "MarkupQuizLoader",
    "RemoteQuizLoader",
    "available_sources",
    "create_loader",
    "directory_reader",
    "http_fetcher",
    "package_asset_reader",
    "parse_markup_quiz",
    "parse_remote_quiz",
    "simulated_fetcher",
]
