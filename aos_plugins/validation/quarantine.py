"""Quarantine - moves failing plugins into plugins/.needs-work/."""

import logging
from pathlib import Path

from aos_plugins.constants import NEEDS_WORK_DIRNAME

logger = logging.getLogger(__name__)


def move_to_needs_work(plugins_dir: Path, plugin_name: str) -> bool:
    """Move plugins/<name> to plugins/.needs-work/<name>.

    Returns:
        True if the folder was moved
    """
    source = plugins_dir / plugin_name
    needs_work = plugins_dir / NEEDS_WORK_DIRNAME
    dest = needs_work / plugin_name

    if dest.exists():
        print(f"⚠️  plugins/{plugin_name}: Already exists in {NEEDS_WORK_DIRNAME}, skipping move")
        return False

    try:
        needs_work.mkdir(parents=True, exist_ok=True)
        source.rename(dest)
    except OSError as e:
        logger.error(f"Failed to move {source} to {dest}: {e}")
        print(f"❌ Failed to move plugins/{plugin_name}: {e}")
        return False

    print(f"📦 Moved plugins/{plugin_name} → plugins/{NEEDS_WORK_DIRNAME}/{plugin_name}")
    return True
