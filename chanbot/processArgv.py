import os
import logging
import errno
import argparse
from chanbot.RunProperties import RunProperties
from chanbot import logConfig


def _parse(argv):
    p = argparse.ArgumentParser(
                        prog='chanbot',
                        add_help=False,
                        formatter_class=argparse.RawDescriptionHelpFormatter,
                        epilog=' ')
    p.add_argument('--help', '-h', '-?', action='help',
                   help="show this message", )
    p.add_argument('--debug', action='store_true', help="Run in debug mode")
    p.add_argument('--config', default='chanbot.ini', metavar='FILE',
                   help="bot configuration file (default: chanbot.ini)")
    p.add_argument('path', default=None, nargs='?',
                   help="run path (default: same path as chanbot.py)")
    p.add_argument('-v', '--version', action='version',
                   version=RunProperties.version)
    return p.parse_args(argv)


def _createDir(name):
    try:
        os.makedirs(name)
    except OSError as exception:
        if exception.errno != errno.EEXIST:
            if exception.errno == errno.EACCES:
                if not os.path.exists(name):
                    raise
            raise


def processArgv(argv, curFolder):
    """ Process the command line arguments and return a RunProperties object.
    argv is sys.argv, including the program name.
    """

    log = logging.getLogger()
    parsed = _parse(argv[1:])
    if parsed.path:
        curFolder = parsed.path
    cwd = os.getcwd()
    os.chdir(curFolder)

    _createDir("data")
    _createDir("log")

    logConfig.logConfig(parsed.debug)

    log.info("-------- Startup --------")
    log.info("Using working directory {}".format(os.getcwd()))

    return RunProperties(parsed.debug, parsed.config, cwd)
