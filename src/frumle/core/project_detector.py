"""
Project detection for frumle.

Infers a project name and the local development base URL by inspecting
environment files, composer.json and the conventions of common PHP
frameworks (Laravel, Symfony, CodeIgniter, CakePHP, Slim, Yii, Laminas,
Phalcon).

Local URL detection is an ordered chain of independent heuristics. Each
heuristic takes the project root and returns a URL or None; the first URL
wins. Detection is advisory and never raises.
"""

import json
import logging
import re
from pathlib import Path
from typing import Callable, Optional, Sequence

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

UrlHeuristic = Callable[[Path], Optional[str]]

# PHP built-in development server
FALLBACK_LOCAL_URL = "http://localhost:8000"
UNKNOWN_PROJECT_NAME = "unknown-project"

ENV_FILES: tuple[str, ...] = (".env", ".env.local", ".env.development", ".env.dev")
PORT_KEYS: tuple[str, ...] = ("APP_PORT", "SERVER_PORT", "PORT")

_PORT_RE = re.compile(r"^\s*(\d+)")
_URL_WITH_PORT_RE = re.compile(r"^https?://[^:/\s]+:(\d+)", re.IGNORECASE)
_FULL_URL_RE = re.compile(r"^(https?://\S+)", re.IGNORECASE)
_SCRIPT_PORT_RE = re.compile(r"--port[=\s]+(\d+)|:(\d+)")
_CI_BASE_URL_RE = re.compile(r"""baseURL\s*=\s*['"]([^'"]+)['"]""")


def localhost(port: int | str) -> str:
    return f"http://localhost:{int(port)}"


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Cannot read {path}: {e}")
        return ""


def _read_json(path: Path) -> Optional[dict]:
    if not path.is_file():
        return None
    try:
        data = json.loads(_read_text(path) or "null")
    except json.JSONDecodeError as e:
        logger.debug(f"Invalid JSON in {path}: {e}")
        return None
    return data if isinstance(data, dict) else None


# --------------------------------------------------------------------------
# Environment files
# --------------------------------------------------------------------------


def _url_from_env_values(values: dict[str, Optional[str]]) -> Optional[str]:
    """Pick a URL out of one parsed environment file."""
    by_key = {key.upper(): (value or "") for key, value in values.items()}

    # Key priority, not file order; DB_PORT and friends never match
    for key in PORT_KEYS:
        match = _PORT_RE.match(by_key.get(key, ""))
        if match:
            return localhost(match.group(1))

    app_url = by_key.get("APP_URL", "").strip()
    match = _URL_WITH_PORT_RE.match(app_url)
    if match:
        return localhost(match.group(1))

    match = _FULL_URL_RE.match(app_url)
    if match:
        return match.group(1)

    return None


def url_from_env_files(root: Path) -> Optional[str]:
    """
    Look for a port or APP_URL in .env, .env.local, .env.development, .env.dev.

    Files are read in that order and the first one yielding a match wins.
    """
    for name in ENV_FILES:
        env_path = root / name
        if not env_path.is_file():
            continue
        try:
            values = dotenv_values(env_path, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Cannot parse {env_path}: {e}")
            continue
        url = _url_from_env_values(values)
        if url:
            return url
    return None


# --------------------------------------------------------------------------
# composer.json
# --------------------------------------------------------------------------


def url_from_composer_scripts(root: Path) -> Optional[str]:
    """Find ``--port=N`` or ``host:N`` in composer.json scripts."""
    composer = _read_json(root / "composer.json")
    if composer is None:
        return None

    scripts = composer.get("scripts")
    if not isinstance(scripts, dict):
        return None

    for script in scripts.values():
        if isinstance(script, list):
            script = " ".join(str(part) for part in script)
        match = _SCRIPT_PORT_RE.search(str(script))
        if match:
            return localhost(match.group(1) or match.group(2))
    return None


# --------------------------------------------------------------------------
# Framework markers
# --------------------------------------------------------------------------


def symfony(root: Path) -> Optional[str]:
    # symfony serve
    if (root / "config/packages/framework.yaml").is_file():
        return "http://localhost:8000"
    return None


def codeigniter(root: Path) -> Optional[str]:
    app_config = root / "app/Config/App.php"
    if app_config.is_file():
        match = _CI_BASE_URL_RE.search(_read_text(app_config))
        if match:
            return match.group(1)
    return None


def cakephp(root: Path) -> Optional[str]:
    if (root / "config/app.php").is_file() and (root / "src/Application.php").is_file():
        return "http://localhost:8765"
    return None


def yii(root: Path) -> Optional[str]:
    if (root / "config/web.php").is_file() or (root / "web/index.php").is_file():
        return "http://localhost:8080"
    return None


def laminas(root: Path) -> Optional[str]:
    if (root / "config/autoload").is_dir() and (root / "config/config.php").is_file():
        return "http://localhost:8080"
    return None


def phalcon(root: Path) -> Optional[str]:
    if (root / ".htrouter.php").is_file() or (root / "app/config/config.php").is_file():
        return "http://localhost:8000"
    return None


def laravel(root: Path) -> Optional[str]:
    # php artisan serve
    if (root / "artisan").is_file():
        return "http://localhost:8000"
    return None


def slim(root: Path) -> Optional[str]:
    public_index = root / "public/index.php"
    if public_index.is_file() and "slim" in _read_text(public_index).lower():
        return "http://localhost:8080"
    return None


FRAMEWORK_HEURISTICS: tuple[UrlHeuristic, ...] = (
    symfony,
    codeigniter,
    cakephp,
    yii,
    laminas,
    phalcon,
    laravel,
    slim,
)

DEFAULT_HEURISTICS: tuple[UrlHeuristic, ...] = (
    url_from_env_files,
    url_from_composer_scripts,
    *FRAMEWORK_HEURISTICS,
)


def detect_local_url(
    project_root: Path | str,
    heuristics: Sequence[UrlHeuristic] = DEFAULT_HEURISTICS,
) -> str:
    """
    Detect the local development server URL of a project.

    Args:
        project_root: Project directory
        heuristics: Ordered heuristics; the first to return a URL wins

    Returns:
        Detected URL, or FALLBACK_LOCAL_URL when no heuristic matches
    """
    root = Path(project_root)
    for heuristic in heuristics:
        try:
            url = heuristic(root)
        except OSError as e:
            logger.debug(f"Heuristic {heuristic.__name__} failed for {root}: {e}")
            continue
        if url:
            logger.debug(f"Local URL {url} detected by {heuristic.__name__}")
            return url
    return FALLBACK_LOCAL_URL


def detect_project_name(project_root: Path | str, override: Optional[str] = None) -> str:
    """
    Pick the project name sent with an analysis.

    Precedence: explicit override, composer.json ``name``, directory name.
    """
    root = Path(project_root)
    name = override

    if name is None:
        composer = _read_json(root / "composer.json")
        if composer and isinstance(composer.get("name"), str) and composer["name"]:
            name = composer["name"]

    if name is None:
        name = root.name or UNKNOWN_PROJECT_NAME

    return name.strip() or UNKNOWN_PROJECT_NAME
