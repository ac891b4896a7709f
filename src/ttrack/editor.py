#!/usr/bin/env python3
"""
Open the ledger in the user's editor.
"""

import os
import platform
import shlex
import subprocess
import sys
from pathlib import Path
from typing import List, Mapping, Optional, Union


def editor_command(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Return the editor command line from ``$VISUAL`` or ``$EDITOR``.

    Parameters
    ----------
    environ : Optional[Mapping[str, str]], optional
        Environment to consult (default: ``os.environ``).

    Returns
    -------
    List[str]
        Command and arguments, without the file to edit.

    Examples
    --------
    >>> editor_command({"EDITOR": "emacs -nw"})
    ['emacs', '-nw']
    >>> editor_command({"VISUAL": "code --wait", "EDITOR": "vi"})
    ['code', '--wait']
    """
    environ = os.environ if environ is None else environ
    for key in ("VISUAL", "EDITOR"):
        value = (environ.get(key) or "").strip()
        if value:
            return shlex.split(value)
    if platform.system().lower() == "windows" or sys.platform == "win32":
        return ["notepad"]
    return ["vi"]


def open_in_editor(
    file_path: Union[str, Path],
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Run the editor on a file and wait for it to exit.

    Parameters
    ----------
    file_path : Union[str, Path]
        File to edit; the editor may create it.
    environ : Optional[Mapping[str, str]], optional
        Environment to read the editor from.

    Returns
    -------
    int
        Editor exit status.

    Raises
    ------
    FileNotFoundError
        If the editor executable does not exist.
    """
    command = editor_command(environ)
    result = subprocess.run([*command, str(Path(file_path))], check=False)
    return result.returncode
