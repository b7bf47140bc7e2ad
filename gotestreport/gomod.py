import re
from pathlib import Path

from gotestreport.logging import get_logger

logger = get_logger(__name__)

_MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


def find_module_name(module_directory: str | Path) -> str | None:
    """Read the module path declared in ``<module_directory>/go.mod``."""
    path = Path(module_directory).expanduser().resolve() / "go.mod"

    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.debug("unable to read %s: %s", path, exc)
        return None

    match = _MODULE_RE.search(contents)
    if not match:
        logger.debug("unable to parse module from %s: no module directive", path)
        return None

    name = match.group(1)
    if name.startswith("//"):
        logger.debug("unable to parse module from %s: empty module directive", path)
        return None

    return name.strip("\"`")
