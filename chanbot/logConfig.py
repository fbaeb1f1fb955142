import logging, logging.handlers #@UnusedImport

__configDone = False


class ShortLevelNameFormatter(logging.Formatter):
    shortNames = {'DEBUG': 'DBG',
                  'INFO': 'INFO',
                  'WARNING': 'WARN',
                  'ERROR': 'ERR',
                  'CRITICAL': 'CRIT'}

    def format(self, record):
        errName = record.levelname
        record.shortlevelname = self.shortNames.get(errName, errName)
        return logging.Formatter.format(self, record)


def _rotatingHandler(fileName, levelWidth):
    fileHandler = logging.handlers.RotatingFileHandler(fileName,
                                                       maxBytes=5000000,
                                                       backupCount=1,
                                                       delay=True)
    fFormatter = ShortLevelNameFormatter("%(asctime)s %(name)-20s "
                                         "%(shortlevelname)-{}s %(message)s"
                                         .format(levelWidth),
                                         '%m-%d %H:%M:%S')
    fileHandler.setFormatter(fFormatter)
    return fileHandler


def logConfig(debug=False, fileName='log/chanbot.log'):
    """ This function configures the bot's logging capability. """
    global __configDone
    if __configDone:
        return
    __configDone = True

    level = logging.DEBUG if debug else logging.INFO
    log = logging.getLogger()
    log.setLevel(level)

    # define a Handler which writes INFO messages or higher to the sys.stderr
    console = logging.StreamHandler()
    console.setLevel(level)
    cFormatter = ShortLevelNameFormatter(
                "%(asctime)s %(name)-18s: %(shortlevelname)-4s %(message)s",
                "%H:%M")
    console.setFormatter(cFormatter)
    log.addHandler(console)

    if fileName:
        log.addHandler(_rotatingHandler(fileName, 4))


def setFileHandler(logName, fileName):
    """ Set a rotating file handler for the log with name logName. Messages
    still propagate to the main log. """
    log = logging.getLogger(logName)
    for h in log.handlers:
        h.close()
    log.handlers = []
    log.addHandler(_rotatingHandler(fileName, 8))
