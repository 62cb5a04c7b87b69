"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/filters.py
File name filtering: a glob set and a regular expression combined with OR.
Globs support '*', '?', '[...]' classes and '{a,b}' alternate groups.
"""

import fnmatch
import re
from typing import List, Optional

from dupfinder.core.interfaces import NameFilter
from dupfinder.core.models import validate_glob, glob_class_end


def expand_braces(pattern: str) -> List[str]:
    """
    Expands alternate groups into plain fnmatch patterns:
        '*.{jpg,png}' -> ['*.jpg', '*.png']
    Braces inside a character class are literal. Expects a validated pattern.
    """
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "[":
            i = glob_class_end(pattern, i)
        elif char == "{":
            alternatives = []
            start = j = i + 1
            while pattern[j] != "}":
                if pattern[j] == "[":
                    j = glob_class_end(pattern, j)
                elif pattern[j] == ",":
                    alternatives.append(pattern[start:j])
                    start = j + 1
                j += 1
            alternatives.append(pattern[start:j])

            prefix = pattern[:i]
            tails = expand_braces(pattern[j + 1:])
            return [prefix + alt + tail for alt in alternatives for tail in tails]
        i += 1
    return [pattern]


class NameFilterImpl(NameFilter):
    """
    Accepts a file name when it matches any glob pattern OR the regex.
    With neither configured every name is accepted.
    """

    def __init__(self, patterns: Optional[List[str]] = None, regex: Optional[str] = None):
        self.patterns = list(patterns) if patterns else []
        for pattern in self.patterns:
            validate_glob(pattern)

        # Globs are matched case-sensitively on every platform
        self._globs = [
            re.compile(fnmatch.translate(expanded))
            for pattern in self.patterns
            for expanded in expand_braces(pattern)
        ]

        try:
            self._regex = re.compile(regex) if regex is not None else None
        except re.error as e:
            raise ValueError(f"Invalid regular expression '{regex}': {e}") from e

    @property
    def is_active(self) -> bool:
        return bool(self._globs) or self._regex is not None

    def accepts(self, filename: str) -> bool:
        if not self.is_active:
            return True
        if not filename:
            return False

        if any(glob.match(filename) for glob in self._globs):
            return True

        # Unanchored search, like a regex test on the bare file name
        if self._regex is not None and self._regex.search(filename):
            return True

        return False
