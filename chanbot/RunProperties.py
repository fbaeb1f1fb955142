import os


class RunProperties(object):
    """ This object holds the global variables for the bot: the current
    debug mode, the configuration file to use and the directory the bot was
    started from.
    """

    version = "0.3.0"
    def __init__(self, debugMode, configFile, originalDir=None):
        self.debug = debugMode
        if debugMode:
            print("Debug mode active")
        self.configFile = configFile
        self.__originalDir = originalDir or os.getcwd()


    @property
    def originalDir(self):
        return self.__originalDir


    def close(self):
        try:
            os.chdir(self.__originalDir)
        except OSError:
            pass
