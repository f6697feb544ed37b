"""Resolve ``KEY_FILE`` environment variables (docker secrets) into ``KEY``."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

SECRET_SUFFIX = "_FILE"


def load_secret_file_variables() -> None:
    """
    Expose the content of every ``*_FILE`` secret as its base variable.

    The Mongo URI usually carries credentials, so deployments mount it as
    ``DB_MONGO_URI_FILE``. An explicitly set base variable always wins.
    Unreadable files are logged and skipped.
    """
    for key, file_path in list(os.environ.items()):
        if not key.endswith(SECRET_SUFFIX) or not file_path:
            continue
        target_key = key[: -len(SECRET_SUFFIX)]
        if os.environ.get(target_key):
            continue
        try:
            os.environ[target_key] = Path(file_path).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "env.secret_file.unreadable",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )


load_secret_file_variables()
