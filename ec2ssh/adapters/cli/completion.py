"""
Bash completion support

bash runs the program with COMP_LINE/COMP_POINT set once it has been
registered with `complete -C ec2-ssh ec2-ssh`; every line printed is one
candidate for the word under the cursor.
"""
import re
from typing import Iterable, List, Optional

from ...core.utils import split_suggestion

PROG_NAME = "ec2-ssh"

_SHELL_SPECIAL = re.compile(r"([\s()\[\]{}'\"\\$&;|<>*?!#~`])")


def registration_script(prog: str = PROG_NAME) -> str:
    """Line that registers the completion provider with bash"""
    return f"complete -C {prog} {prog}"


def escape_candidate(value: str) -> str:
    """Backslash-escape characters bash would otherwise split or expand"""
    return _SHELL_SPECIAL.sub(r"\\\1", value)


def current_word(comp_line: str, comp_point: Optional[str] = None) -> Optional[str]:
    """
    Word being completed, or None when no suggestion applies.
    
    Only the first argument is completed; once it is finished the
    command takes nothing more.
    """
    line = comp_line
    if comp_point is not None and comp_point.isdigit():
        line = comp_line[:int(comp_point)]
    
    words = line.split()
    if line.endswith((" ", "\t")):
        words.append("")
    
    if len(words) != 2:
        return None
    return words[1]


def completion_candidates(
    suggestions: Iterable[str],
    comp_line: str,
    comp_point: Optional[str] = None,
) -> List[str]:
    """
    Candidates for bash from "tag:address" suggestions.
    
    The tag is what gets inserted; the address is kept for zsh-style
    descriptions only and dropped here.
    """
    word = current_word(comp_line, comp_point)
    if word is None:
        return []
    
    candidates: List[str] = []
    for value in suggestions:
        tag, _ = split_suggestion(value)
        escaped = escape_candidate(tag)
        if escaped.startswith(word) and escaped not in candidates:
            candidates.append(escaped)
    return candidates
