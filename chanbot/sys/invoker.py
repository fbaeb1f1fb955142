""" Runs one handler call with a deadline.

The result of invoke() is always one of Ok, Failed or TimedOut; the invoker
itself never raises for anything the handler does. Turning Failed and
TimedOut into silence is left to the caller.
"""

import sys
import logging
import traceback
from collections import namedtuple
from chanbot.common.message import toResponse, NoResponse
from chanbot.util.ExceptionThread import ExceptionThread


class Ok(namedtuple('Ok', ['response'])):
    __slots__ = ()

    def toResponse(self):
        return self.response


class Failed(namedtuple('Failed', ['reason', 'traceback'])):
    """ The handler raised. reason is the exception, traceback its
    formatted text. """
    __slots__ = ()

    def __new__(cls, reason, traceback=None):
        return super(Failed, cls).__new__(cls, reason, traceback)

    def toResponse(self):
        return NoResponse


class TimedOut(namedtuple('TimedOut', ['timeout'])):
    __slots__ = ()

    def toResponse(self):
        return NoResponse


class HandlerThread(ExceptionThread):
    """ Daemon thread running one handler call. If the call outlives its
    deadline the thread is simply abandoned; nothing reads its result. """

    def __init__(self, handler, args, identity):
        self._handler = handler
        self._args = args
        self.result = None
        self.finished = False
        super(HandlerThread, self).__init__(name="Handler-{}".format(identity))
        self.daemon = True

    def _run(self):
        self.result = self._handler(*self._args)
        self.finished = True


class Invoker(object):
    def __init__(self):
        self._log = logging.getLogger("dispatch")

    def invoke(self, handler, args, timeout, identity="handler"):
        t = HandlerThread(handler, args, identity)
        t.start()
        try:
            t.join(timeout)
        except BaseException:
            # includes SystemExit raised inside the handler thread
            e = sys.exc_info()[1]
            return Failed(e, ''.join(traceback.format_exception(
                    type(e), e, e.__traceback__)))
        if t.is_alive() or not t.finished:
            self._log.debug("Abandoning {} after {} seconds"
                            .format(identity, timeout))
            return TimedOut(timeout)
        try:
            return Ok(toResponse(t.result))
        except TypeError as e:
            return Failed(e, None)
