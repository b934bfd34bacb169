# Copyright 2010 New Relic, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import sys

_builtin_plugins = [
    "generate_config",
    "local_config",
    "score",
]

_commands = {}


def command(name, options="", description="", hidden=False):
    def wrapper(callback):
        callback.name = name
        callback.options = options
        callback.description = description
        callback.hidden = hidden
        _commands[name] = callback
        return callback

    return wrapper


def usage(name):
    details = _commands[name]
    print("Usage: apdex-admin %s %s" % (name, details.options))


@command("help", "[command]", hidden=True)
def help(args):
    if not args:
        print("Usage: apdex-admin command [options]")
        print()
        print("Type 'apdex-admin help <command>' ", end="")
        print("for help on a specific command.")
        print()
        print("Available commands are:")

        commands = sorted(_commands.keys())
        for name in commands:
            details = _commands[name]
            if not details.hidden:
                print(" ", name)

    else:
        name = args[0]

        if name not in _commands:
            print("Unknown command '%s'." % name, end=" ")
            print("Type 'apdex-admin help' for usage.")

        else:
            details = _commands[name]

            print("Usage: apdex-admin %s %s" % (name, details.options))
            if details.description:
                print()
                print(details.description)


def load_internal_plugins():
    for name in _builtin_plugins:
        module_name = "%s.%s" % (__name__, name)
        __import__(module_name)


def load_external_plugins():
    from importlib.metadata import entry_points

    group = "apdex.admin"

    for entrypoint in entry_points(group=group):
        __import__(entrypoint.module)


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    if argv:
        command = argv[0]
    else:
        command = "help"

    callback = _commands.get(command)

    if callback is None:
        print("Unknown command '%s'." % command, end=" ")
        print("Type 'apdex-admin help' for usage.")
        sys.exit(1)

    callback(argv[1:])


load_internal_plugins()
load_external_plugins()

if __name__ == "__main__":
    main()
