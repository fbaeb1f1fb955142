""" Reader for the runtime settings file consulted by modules.

    # comment
    title                          -> title = True
    pony = off                     -> pony = False
    title_timeout = 4              -> "4" (or 4 if the default is an int)
    greeting = "hi there"          -> "hi there"
    nicks = "a b" "c"              -> ["a b", "c"]
    resp = "hi" "Moin!" "Servus!"  -> resp = {"hi": ["Moin!", "Servus!"]}

Lines that do not fit are skipped; a broken settings file never stops the
bot.
"""

import io
import re
import logging
from chanbot.util.textProcessing import stringToBool


RESPONSE_KEY = 'resp'

_lineRegex = re.compile(r'^\s*(\w+)\s*(?:=\s*(.*?)\s*)?$')
_quotedRegex = re.compile(r'"(.*?)"')
_boolWords = ('on', 'off', 'true', 'false', 'yes', 'no')


def _log():
    return logging.getLogger("config")


def parseLine(line):
    """ Return (key, value) for one settings line, or None if the line is
    blank, a comment or malformed. """
    m = _lineRegex.match(line.rstrip("\r\n"))
    if m is None:
        return None
    key, val = m.group(1), m.group(2)
    if val is None:
        return (key, True)
    if '"' in val:
        quoted = _quotedRegex.findall(val)
        if not quoted:
            return None
        val = quoted[0] if len(quoted) == 1 else quoted
    return (key, val)


def coerceValue(value, default=None):
    """ Convert a raw settings value to the type of its declared default.
    Raises ValueError if that is not possible. """
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        return stringToBool(value)
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    if (default is None and isinstance(value, str)
            and value.strip().lower() in _boolWords):
        return stringToBool(value)
    return value


def parseSettings(lines, defaults=None):
    """ Parse an iterable of lines. Values are coerced to the type of the
    matching entry in defaults. """
    log = _log()
    defaults = defaults or {}
    settings = {}
    for lineNo, line in enumerate(lines, 1):
        parsed = parseLine(line)
        if parsed is None:
            if line.strip() and not line.lstrip().startswith('#'):
                log.debug("Skipping malformed settings line {}: {!r}"
                          .format(lineNo, line))
            continue
        key, val = parsed
        if key == RESPONSE_KEY:
            if not isinstance(val, list) or len(val) < 2:
                log.debug("Skipping response line {} without replies"
                          .format(lineNo))
                continue
            settings.setdefault(RESPONSE_KEY, {})[val[0]] = val[1:]
            continue
        try:
            settings[key] = coerceValue(val, defaults.get(key))
        except (ValueError, TypeError):
            log.debug("Skipping settings line {}: bad value for {}: {!r}"
                      .format(lineNo, key, val))
    return settings


def readSettings(fileName, defaults=None):
    """ Read a settings file. A missing file gives empty settings. """
    try:
        with io.open(fileName, encoding='utf-8', errors='replace') as f:
            return parseSettings(f, defaults)
    except IOError:
        _log().info("No settings file {}; using defaults.".format(fileName))
        return {}
