# this file holds the spec for the chanbot.ini file, to be used by ConfigObj.

CONFIG_SPEC = """# bot configuration

# If enabled, this configuration file will be automatically overwritten.
# Your comments will be erased,
# but optional values will be automatically inserted.
overwrite_config = boolean(default=True)

[bot]
    # default nick, used by connections that do not set their own
    nick = string(default=chanbot)

    # a command is a message starting with this character, e.g. !help
    command_prefix = string(min=1, max=1, default="!")

    # runtime settings consulted by modules (title, pony, resp, ...)
    settings_file = string(default=data/settings.conf)

    # modules are imported from this package, in the listed order. The
    # first module that answers a message wins.
    base = string(default=chanbot.modules)
    modules = force_list(default=list('core.CoreModule', 'general.FtbModule', 'general.QuoteModule', 'general.LinkTitleModule', 'general.PonyModule', 'general.SaluteModule', 'general.ResponseModule'))

# One sub-section per chat network. Each runs independently.
#
#    [[libera]]
#        protocol = irc
#        host = irc.libera.chat
#        port = 6697
#        ssl = True
#        channels = "#rib", "#chanbot"
#
[connections]
    [[__many__]]
        protocol = option('irc', default='irc')
        host = string()
        port = integer(min=1, max=65535, default=6667)
        ssl = boolean(default=False)
        channels = force_list(default=list())
        nick = string(default="")
        user = string(default=chanbot)
        realname = string(default=chanbot)
        ascii_only = boolean(default=False)
        reconnect_wait = integer(min=1, default=60)
        encoding = string(default=utf-8)
"""
