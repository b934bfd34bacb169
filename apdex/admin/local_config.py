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

from apdex.admin import command, usage


@command(
    "local-config",
    "config_file [environment]",
    """Dumps out the local configuration after having loaded the settings
from <config_file>.""",
)
def local_config(args):
    import sys

    if len(args) == 0:
        usage("local-config")
        sys.exit(1)

    from apdex.config import initialize
    from apdex.core.config import create_settings_snapshot, flatten_settings
    from apdex.core.exceptions import ApdexError

    config_file = args[0]
    environment = args[1] if len(args) >= 2 else None

    if config_file == "-":
        config_file = None

    try:
        initialize(config_file, environment, ignore_errors=False)
    except ApdexError as exc:
        print("ERROR: %s" % exc, file=sys.stderr)
        sys.exit(1)

    config = flatten_settings(create_settings_snapshot())

    keys = sorted(config.keys())

    for key in keys:
        print("%s = %r" % (key, config[key]))
