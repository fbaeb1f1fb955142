import re
import html
import socket
import http.client
import urllib.request
import urllib.error
from chanbot.modules.BaseModule import BaseModule
from chanbot.util.textProcessing import stringToBool, collapseWhitespace
from chanbot.util.ircFormat import colorize, WHITE, BLACK, RED, TEAL


USER_AGENT = "Mozilla/5.0 (compatible; chanbot)"
MAX_BYTES = 256 * 1024
_titleRegex = re.compile(r'<title[^>]*>(.*?)</title\s*>', re.I | re.S)

_youtube = re.compile(r'\s+- YouTube\s*\Z')
_xkcd = re.compile(r'\Axkcd:\s')
_deviantArt = re.compile(r'\son\sdeviantART\Z')
_wikipedia = re.compile(r'\s+(-|–) Wikipedia(, the free encyclopedia)?\Z')
_postillon = re.compile(r'\ADer Postillon:\s')


def extractTitle(txt):
    """ Return the unescaped, whitespace-collapsed <title> of an HTML page,
    or None. """
    m = _titleRegex.search(txt)
    if m is None:
        return None
    return collapseWhitespace(html.unescape(m.group(1))) or None


def fetchTitle(url, timeout):
    """ Download url and return its title. Pages that are not text/html
    have no title. Redirects are followed (up to urllib's limit of 10). """
    req = urllib.request.Request(url, headers={'User-Agent': USER_AGENT})
    with urllib.request.urlopen(req, timeout=timeout) as response:
        if response.headers.get_content_type() != 'text/html':
            return None
        charset = response.headers.get_content_charset() or 'utf-8'
        data = response.read(MAX_BYTES)
    try:
        return extractTitle(data.decode(charset, 'replace'))
    except LookupError:
        return extractTitle(data.decode('utf-8', 'replace'))


def formatTitle(title, protocol=None):
    if not title:
        return None
    irc = (protocol == 'irc')
    if _youtube.search(title) and irc:
        return "{}{} {}".format(colorize("You", BLACK, WHITE),
                                colorize("Tube", WHITE, RED),
                                _youtube.sub("", title))
    if _xkcd.search(title):
        return "xkcd: {}".format(_xkcd.sub("", title))
    if _deviantArt.search(title):
        if irc:
            return "{} {}".format(colorize("deviantART", WHITE, TEAL),
                                  _deviantArt.sub("", title))
        return "deviantART: {}".format(_deviantArt.sub("", title))
    if _wikipedia.search(title):
        return "Wikipedia: {}".format(_wikipedia.sub("", title))
    if _postillon.search(title):
        return "Der Postillon: {}".format(_postillon.sub("", title))
    return "Title: {}".format(title)


class LinkTitleModule(BaseModule):
    """
    Posts the HTML title of links mentioned in chat.

    Configuration options:
    title - fetch titles at all [True]
    title_timeout - seconds to wait for a page [4]
    """
    _name = "LinkTitle"
    fetch = staticmethod(fetchTitle)


    @classmethod
    def _define(cls, d):
        d.describe("HTML title parser for URLs")
        d.setDefaultConfig({'title': True, 'title_timeout': 4})
        d.registerTrigger(r'(https?://[-?&+%=_.~a-zA-Z0-9/:#]+)',
                          cls.htmlTitle, timeout=8)
        d.registerCommand('title', ['state'], handler=cls.title, required=1)
        d.describe('title', "!title <on|off>: de-/activate HTML title "
                            "parsing")


    def htmlTitle(self, match, user, source):
        prefix = self.config.get('command_prefix') or '!'
        if self.msg.payload.startswith(prefix):
            return None
        if not self.config.get('title'):
            return None
        url = match.group(1)
        try:
            title = self.fetch(url, self.config.get('title_timeout', 4))
        except (urllib.error.URLError, http.client.HTTPException,
                socket.timeout, ValueError) as e:
            self.debugLog("Could not get title of {}: {}".format(url, e))
            return None
        self.debugLog("{} -> {}".format(url, title))
        return formatTitle(title, self.protocol)


    def title(self, params, user, source, bot):
        try:
            on = stringToBool(params['state'])
        except ValueError:
            return "Usage: {}title <on|off>".format(
                        self.config.get('command_prefix') or '!')
        bot.configStore.set('title', on)
        if on:
            return "will try to parse HTML titles"
        return "will not try to parse HTML titles"
