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

import os
import sys

python_version = sys.version_info[:2]

assert python_version >= (3, 10), "The Apdex scoring tool only supports Python 3.10+."

from setuptools import setup  # noqa: E402


def apdex_guess_next_version(tag_version):
    version, _, _ = str(tag_version).partition("+")
    version_info = list(map(int, version.split(".")))
    if len(version_info) < 3:
        return version
    version_info[1] += 1
    version_info[2] = 0
    return ".".join(map(str, version_info))


def apdex_next_version(version):
    if version.exact:
        return version.format_with("{tag}")
    else:
        return version.format_next_version(apdex_guess_next_version, fmt="{guessed}")


script_directory = os.path.dirname(__file__)
if not script_directory:
    script_directory = os.getcwd()

readme_file = os.path.join(script_directory, "README.rst")

packages = [
    "apdex",
    "apdex.admin",
    "apdex.common",
    "apdex.core",
]

classifiers = [
    "Development Status :: 4 - Beta",
    "License :: OSI Approved :: Apache Software License",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Programming Language :: Python :: Implementation :: CPython",
    "Programming Language :: Python :: Implementation :: PyPy",
    "Topic :: System :: Monitoring",
]

kwargs = dict(
    name="apdex",
    use_scm_version={
        "version_scheme": apdex_next_version,
        "local_scheme": "no-local-version",
        "git_describe_command": "git describe --dirty --tags --long --match *.*.*",
        "write_to": "apdex/_version.py",
        "fallback_version": "0.1.0",
    },
    description="Application Performance Index (Apdex) scoring",
    long_description=open(readme_file).read(),
    license="Apache-2.0",
    zip_safe=False,
    classifiers=classifiers,
    packages=packages,
    python_requires=">=3.10",
    package_data={
        "apdex": ["apdex.ini"],
    },
    install_requires=["rich"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["apdex-admin = apdex.admin:main"],
    },
)

setup(**kwargs)
