"""Detect the deployed site URL from configuration files in the repository."""

import json
import re
from collections.abc import Awaitable, Callable

from gitshelf.logging import get_logger

logger = get_logger("scan")

ReadFile = Callable[[str], Awaitable[str]]

# site: 'https://example.com' in JS/TS config objects
JS_SITE_RE = re.compile(r"""site\s*:\s*['"](https?://[^'"]+)['"]""")
# site: https://example.com / url: "https://example.com" in YAML
YAML_SITE_RE = re.compile(r"""^\s*(?:site|url)\s*:\s*['"]?(https?://[^'"\s]+)['"]?""", re.MULTILINE)

SITE_CONFIG_PROBES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("astro.config.mjs", JS_SITE_RE),
    ("astro.config.ts", JS_SITE_RE),
    ("astro.config.js", JS_SITE_RE),
    ("src/config.yaml", YAML_SITE_RE),
    ("src/config.yml", YAML_SITE_RE),
    ("src/config.ts", JS_SITE_RE),
    ("src/config.js", JS_SITE_RE),
)

PACKAGE_MANIFEST = "package.json"


async def find_production_url(read_file: ReadFile) -> str | None:
    """
    Return the first site URL found, without a trailing slash.

    Config files are probed in priority order, then the package
    manifest's ``homepage``. Unreadable files are skipped.
    """
    for path, pattern in SITE_CONFIG_PROBES:
        try:
            content = await read_file(path)
        except Exception as e:
            logger.debug("Skipping %s: %s", path, e)
            continue
        match = pattern.search(content)
        if match:
            logger.info("Site URL found in %s", path)
            return match.group(1).rstrip("/")

    try:
        manifest = json.loads(await read_file(PACKAGE_MANIFEST))
    except Exception as e:
        logger.debug("Skipping %s: %s", PACKAGE_MANIFEST, e)
        return None

    homepage = manifest.get("homepage") if isinstance(manifest, dict) else None
    if isinstance(homepage, str) and homepage.startswith("http"):
        logger.info("Site URL found in %s", PACKAGE_MANIFEST)
        return homepage.rstrip("/")
    return None


__all__ = ["SITE_CONFIG_PROBES", "find_production_url"]
