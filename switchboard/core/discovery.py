# switchboard/core/discovery.py
"""Import every module of a handler package so its decorators register.

Usage:
    from switchboard.core.discovery import discover

    discover("switchboard.handlers")

Dispatchers never depend on this; they only receive the definitions the
registration decorators collected.
"""

import importlib
import logging
import pkgutil

logger = logging.getLogger(__name__)


def discover(package_path: str) -> int:
    """Import all modules of a package, recursively.

    Modules whose name starts with an underscore are skipped. A module that
    fails to import is logged and skipped.

    Args:
        package_path: Python package path (e.g., "switchboard.handlers").

    Returns:
        Number of modules imported.
    """
    try:
        package = importlib.import_module(package_path)
    except ImportError as e:
        logger.warning("Failed to import package %s: %s", package_path, e)
        return 0

    if not hasattr(package, "__path__"):
        logger.warning("Package %s has no __path__ attribute", package_path)
        return 0

    count = 0
    for _, name, is_pkg in pkgutil.iter_modules(package.__path__):
        if name.startswith("_"):
            continue

        module_path = f"{package_path}.{name}"
        if is_pkg:
            count += discover(module_path)
            continue

        try:
            importlib.import_module(module_path)
        except ImportError as e:
            logger.warning("Failed to import module %s: %s", module_path, e)
            continue
        count += 1
        logger.debug("Imported handler module %s", module_path)

    logger.info("Discovered %d handler module(s) in %s", count, package_path)
    return count
