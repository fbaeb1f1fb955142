import sys
import os
import signal
import logging
import inspect
import threading
from chanbot.processArgv import processArgv
from chanbot.sys.BotSystem import BotSystem
from chanbot.common.exceptions import FatalError

exitEvent = threading.Event()
reloadEvent = threading.Event()


def runLoop(props):
    """ Run the bot system once. Returns the number of seconds to wait
    before running it again, or -1 to stop. """
    log = logging.getLogger()
    try:
        bsys = BotSystem(props, exitEvent, reloadEvent)
        bsys.loop()
        return 0
    except (SystemExit, KeyboardInterrupt):
        log.info("Exiting application.")
        return -1
    except FatalError:
        log.exception("Fatal error.")
        raise
    except Exception:
        log.exception("Unknown error.")
        if props.debug:
            raise
        return 60
    finally:
        log.info("----- Bot system stopped. -----\n")


def signalHandler(signum, stackFrame):
    print("\n"
          "******************************************\n"
          "* Preparing to shut down, please wait... *\n"
          "******************************************\n")
    exitEvent.set()


def reloadHandler(signum, stackFrame):
    logging.getLogger().info("Reload requested.")
    reloadEvent.set()


def main(curFolder=None):
    import __main__
    if curFolder is None:
        try:
            curFolder = os.path.dirname(
                            os.path.abspath(inspect.getfile(__main__)))
        except TypeError:
            curFolder = os.getcwd()
    props = processArgv(sys.argv, curFolder) # set current folder
    log = logging.getLogger()
    loginWait = 0

    # register signals
    signal.signal(signal.SIGTERM, signalHandler)
    signal.signal(signal.SIGINT, signalHandler)
    if hasattr(signal, 'SIGHUP'):
        signal.signal(signal.SIGHUP, reloadHandler)

    try:
        while loginWait >= 0 and not exitEvent.is_set():
            if loginWait > 0:
                log.info("Sleeping for {} seconds.".format(loginWait))
                exitEvent.wait(loginWait)
            if exitEvent.is_set():
                break
            loginWait = runLoop(props)
    except FatalError:
        return 1
    finally:
        log.info("Main thread done.")
        props.close()
        log.info("-------- System Shutdown --------\n")
    return 0
