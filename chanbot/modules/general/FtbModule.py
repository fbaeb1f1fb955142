import re
import json
import socket
import http.client
import urllib.parse
import urllib.request
import urllib.error
from chanbot.modules.BaseModule import BaseModule
from chanbot.util.ircFormat import bold


DEFAULT_URL = 'https://flipez.de/ftb/api?q='


def getScore(apiUrl, url, timeout):
    """ Ask the FTB API for the score of url. """
    req = urllib.request.Request(apiUrl + urllib.parse.quote(url, safe=''))
    with urllib.request.urlopen(req, timeout=timeout) as response:
        charset = response.headers.get_content_charset() or 'utf-8'
        result = json.loads(response.read().decode(charset, 'replace'))
    return result['test']['result']


class FtbModule(BaseModule):
    """
    !ftb <url>: benchmark a site against bastelfreak's blog.

    Configuration options:
    ftb_url - score API, the url is appended [https://flipez.de/ftb/api?q=]
    """
    _name = "FasterThanBastelfreak"
    score = staticmethod(getScore)


    @classmethod
    def _define(cls, d):
        d.describe("Benchmark the given URL against bastelfreaks blog")
        d.setDefaultConfig({'ftb_url': DEFAULT_URL})
        d.registerCommand('ftb', ['url'], handler=cls.ftb, required=1)
        d.setTimeout('ftb', 10)
        d.describe('ftb', "!ftb <url>: get the FTB(TM) score of a site")


    def ftb(self, params, user, source, bot):
        url = re.sub(r'\A(https?://)?', 'https://', params['url'], count=1)
        try:
            score = self.score(self.config.get('ftb_url', DEFAULT_URL), url,
                               9)
        except (urllib.error.URLError, http.client.HTTPException,
                socket.timeout, ValueError, KeyError, TypeError) as e:
            self.errorLog("FTB lookup for {} failed: {!r}".format(url, e))
            return None
        score = str(score)
        if self.protocol == 'irc':
            score = bold(score)
        return "{} reached a FTB(TM) Score of {}".format(url[len('https://'):],
                                                        score)
