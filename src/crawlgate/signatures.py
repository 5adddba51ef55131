"""Crawler signatures and static-asset extensions.

Both tables are process-wide, read-only data loaded once at startup from
a TOML file. The packaged default lives in ``crawlgate/data/signatures.toml``;
point ``GateConfig.signatures_file`` at another file to update the lists
without touching code.
"""

import re
import tomllib
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from crawlgate.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class CrawlerSignatures:
    """Ordered set of case-insensitive User-Agent matchers.

    Matching is a pure predicate: any single match suffices, so order
    never changes the outcome.
    """

    patterns: tuple[re.Pattern[str], ...]

    @classmethod
    def compile(cls, sources: tuple[str, ...] | list[str]) -> "CrawlerSignatures":
        """Compile regex sources; raise ``ConfigurationError`` on bad syntax."""
        compiled: list[re.Pattern[str]] = []
        for source in sources:
            try:
                compiled.append(re.compile(source, re.IGNORECASE))
            except re.error as exc:
                msg = f"Invalid crawler pattern {source!r}: {exc}"
                raise ConfigurationError(msg) from exc
        return cls(tuple(compiled))

    def matches(self, user_agent: str | None) -> bool:
        """True if any pattern occurs in *user_agent*. Empty never matches."""
        if not user_agent:
            return False
        return any(pattern.search(user_agent) for pattern in self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


@dataclass(frozen=True, slots=True)
class StaticAssetExtensions:
    """Filename suffixes that never get prerendered."""

    suffixes: tuple[str, ...]

    @classmethod
    def normalize(cls, extensions: tuple[str, ...] | list[str]) -> "StaticAssetExtensions":
        """Lowercase every extension and make sure it starts with a dot."""
        suffixes = []
        for ext in extensions:
            ext = ext.strip().lower()
            if not ext or ext == ".":
                msg = "Static asset extensions must be non-empty"
                raise ConfigurationError(msg)
            suffixes.append(ext if ext.startswith(".") else f".{ext}")
        return cls(tuple(suffixes))

    def matches(self, path: str) -> bool:
        """True if the lowercased *path* ends with one of the suffixes."""
        return path.lower().endswith(self.suffixes)

    def __len__(self) -> int:
        return len(self.suffixes)


@dataclass(frozen=True, slots=True)
class SignatureSet:
    """Crawler signatures plus the static-asset extension set."""

    crawlers: CrawlerSignatures
    static_assets: StaticAssetExtensions


def load_signatures(path: str | Path | None = None) -> SignatureSet:
    """Load the signature tables from a TOML file.

    Args:
        path: File to read. ``None`` loads the packaged defaults.

    Raises:
        ConfigurationError: The file is missing, is not valid TOML, lacks a
            table, or holds a non-string entry or an invalid regex.
    """
    if path is None:
        source = "crawlgate/data/signatures.toml"
        text = resources.files("crawlgate.data").joinpath("signatures.toml").read_text("utf-8")
    else:
        source = str(path)
        try:
            text = Path(path).read_text("utf-8")
        except OSError as exc:
            msg = f"Cannot read signatures file {source}: {exc}"
            raise ConfigurationError(msg) from exc

    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {source}: {exc}"
        raise ConfigurationError(msg) from exc

    patterns = _string_list(data, "crawlers", "patterns", source)
    extensions = _string_list(data, "static_assets", "extensions", source)

    return SignatureSet(
        crawlers=CrawlerSignatures.compile(patterns),
        static_assets=StaticAssetExtensions.normalize(extensions),
    )


def _string_list(data: dict[str, Any], table: str, key: str, source: str) -> list[str]:
    section = data.get(table)
    if not isinstance(section, dict) or key not in section:
        msg = f"{source}: missing [{table}] {key} = [...]"
        raise ConfigurationError(msg)
    values = section[key]
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        msg = f"{source}: [{table}] {key} must be a list of strings"
        raise ConfigurationError(msg)
    return values
