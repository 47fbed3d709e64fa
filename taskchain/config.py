import os


def getflag(name, default=False):
    default = "true" if default else "false"
    return os.environ.get(name, default).lower() in ("true", "1")


# Write an error record before an unhandled rejection is escalated.
LOG_UNHANDLED = getflag("TASKCHAIN_LOG_UNHANDLED", default=True)
