import logging

from rich.pretty import pprint

from argbind import *

tool = Command(
    Flag("-v", "--verbose"),
    Option("-j", "--jobs", type=int, default=1),
    Group(
        Option("--host", default="localhost"),
        Option("--port", type=int, default=8080),
        dest="server",
        namespace="server",
    ),
    commands=(
        Command(
            Option("-m", "--message", required=True),
            Positional("PATHS", remainder=True),
            name="commit",
            aliases=("ci",),
        ),
    ),
    name="tool",
)


if __name__ == '__main__':
    logging.basicConfig(level=logging.DEBUG)
    namespace, leftovers = parse(tool)
    pprint(namespace)
    pprint(leftovers)
