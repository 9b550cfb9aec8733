from rich.pretty import pprint

from confargs import *

__prog__ = "confargs-demo"

parser = Parser(shell=True, fancy=True, prog=__prog__)
parser.on("-v", "--verbose", "print more details", key="verbose")
parser.add("output", "out.txt", "-o", "--output FILE", "where to write")
parser.separator("filters:")
parser.add("tags", [], "-t", "--tag A,B", "tags to keep", limit=8)
parser.on("--[no-]color", "colorize the output", key="color")
parser.on("--server:port PORT", "port to bind", key="port", callback=int)


if __name__ == '__main__':
    arguments = parser.parse()
    parser.print_help()
    pprint({"config": parser.config, "arguments": arguments})
