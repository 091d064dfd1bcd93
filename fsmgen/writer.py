# fsmgen/writer.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Union

from fsmgen.core.errors import OutputError

if TYPE_CHECKING:
    from fsmgen.compiler import CompilationResult

logger = logging.getLogger(__name__)

FILE_MODE = 0o664


def write_generated(result: "CompilationResult", directory: Union[str, Path]) -> Path:
    """
    Write a compilation result next to its declaration.

    The file is written to a temporary sibling and moved into place, so a
    failed write never leaves a truncated artifact behind.

    :param result: Successful compilation result.
    :param directory: Output directory.
    :return: Absolute path of the written file.
    :raises OutputError: If the file can't be written.
    """
    directory = Path(directory).resolve()
    target = directory / result.file_name
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{result.file_name}.", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(result.source)
        os.chmod(tmp_name, FILE_MODE)
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputError(f"can't write file to disk: {target}: {e}") from e
    logger.info(f"Wrote {target}")
    return target
