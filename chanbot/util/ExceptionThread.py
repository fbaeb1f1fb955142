import sys
import threading


class ExceptionThread(threading.Thread):
    """ A special type of thread that keeps track of exceptions.
    Note that you should override _run() and not run() when you
    derive from ExceptionThread.
    
    If the calling thread calls join(), it will throw whatever
    exception occurred here.
    """
    
    def __init__(self, *args, **kwargs):
        self._exc = None
        super(ExceptionThread, self).__init__(*args, **kwargs)
        
    def run(self):
        try:
            self._run()
        except BaseException:
            self._exc = sys.exc_info()
            
    def _run(self):
        pass
    
    def join(self, timeout=None):
        super(ExceptionThread, self).join(timeout)
        if self._exc is not None:
            e = self._exc
            self._exc = None
            raise e[1].with_traceback(e[2])
