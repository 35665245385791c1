"""
Small helpers shared by the unit framework.
"""
from __future__ import annotations

import inspect
import re


def documentation(unit) -> str:
    """
    The docstring of a unit as it is shown on the command line: references to rebyte objects in
    backticks are reduced to the object name and the remaining backticks are removed.
    """
    docs = inspect.getdoc(unit) or ''
    docs = re.sub(R'`rebyte(?:\.\w+)*\.(\w+)`', R'\1', docs)
    return docs.replace('`', '')


def isstream(obj) -> bool:
    return callable(getattr(obj, 'read', None))


def isbuffer(obj) -> bool:
    """
    Whether the object supports the buffer protocol.
    """
    try:
        memoryview(obj).release()
    except TypeError:
        return False
    return True


def _normalize(words: str, separator: str) -> str:
    return re.sub(R'[-\s_.]+', separator, words).strip(separator)


def normalize_to_display(words: str) -> str:
    """
    Join the words of a name with dashes, i.e. `hex_bytes` becomes `hex-bytes`.
    """
    return _normalize(words, '-')


def normalize_to_identifier(words: str) -> str:
    """
    Join the words of a name with underscores, i.e. `hex-bytes` becomes `hex_bytes`.
    """
    return _normalize(words, '_')


def exception_to_string(exception: BaseException) -> str:
    """
    A short description of the exception for log output: the longest string among its arguments,
    or the name of the exception type if it has none.
    """
    messages = [a for a in exception.args if isinstance(a, str)]
    if messages:
        return max(messages, key=len).strip()
    if exception.args:
        return str(exception)
    return exception.__class__.__name__
