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

import json
import sys

import pytest

from apdex.admin import main


def _run(args):
    try:
        main(args)
    except SystemExit as exc:
        return exc.code
    return 0


def test_help(global_settings, capsys):
    assert _run([]) == 0

    out = capsys.readouterr().out
    assert "Usage: apdex-admin command [options]" in out
    for name in ("score", "local-config", "generate-config"):
        assert name in out


def test_help_command(global_settings, capsys):
    assert _run(["help", "score"]) == 0
    assert "Usage: apdex-admin score" in capsys.readouterr().out


def test_unknown_command(global_settings, capsys):
    assert _run(["bogus"]) == 1
    assert "Unknown command 'bogus'." in capsys.readouterr().out


def test_score(global_settings, samples_file, capsys):
    path = samples_file([0.5, 2.0, 10.0])

    assert _run(["score", "-t", "1.0", "--color", "never", path]) == 0
    assert capsys.readouterr().out == "0.50 [1.0]*\n"


def test_score_rating(global_settings, samples_file, capsys):
    path = samples_file([0.5, 2.0, 10.0])

    assert _run(["score", "-t", "1.0", "-f", "rating", path]) == 0
    assert capsys.readouterr().out == "Poor [1.0]*\n"


def test_score_no_samples(global_settings, samples_file, capsys):
    path = samples_file([])

    assert _run(["score", "-t", "10", path]) == 0
    assert capsys.readouterr().out == "NS [10]\n"


def test_score_merges_files(global_settings, samples_file, capsys):
    a = samples_file([0.5, 0.5], name="a.txt")
    b = samples_file([10.0, "error"], name="b.txt")

    assert _run(["score", "-t", "1.0", "--per-file", a, b]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["%s: 1.00 [1.0]*" % a, "%s: 0.00 [1.0]*" % b, "0.50 [1.0]*"]


def test_score_json(global_settings, samples_file, capsys):
    a = samples_file([0.5, 2.0], name="a.txt")
    b = samples_file([10.0], name="b.txt")

    assert _run(["score", "-t", "1.0", "-f", "json", "--per-file", a, b]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["total"]["satisfied"] == 1
    assert data["total"]["tolerated"] == 1
    assert data["total"]["frustrated"] == 1
    assert data["total"]["score"] == 0.5
    assert data["files"][a]["total"] == 2
    assert data["files"][b]["score"] == 0.0


def test_score_json_no_data(global_settings, samples_file, capsys):
    assert _run(["score", "-t", "1.0", "-f", "json", samples_file([])]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["total"]["score"] is None
    assert data["total"]["rating"] == "NoSample"


def test_score_hit_rate(global_settings, samples_file, capsys):
    path = samples_file([10.0, 10.0])

    assert _run(["score", "-t", "1.0", "--hit-rate", "0.5", path]) == 0
    assert capsys.readouterr().out == "0.50 [1.0]*\n"


def test_score_color(global_settings, samples_file, capsys):
    path = samples_file([0.5] * 100)

    assert _run(["score", "-t", "1.0", "--color", "always", path]) == 0

    out = capsys.readouterr().out
    assert out.startswith("\033[36m1.00 [1.0]")
    assert out.endswith("\033[0m\n")


def test_score_color_small_group_uncolored(global_settings, samples_file, capsys):
    path = samples_file([0.5])

    assert _run(["score", "-t", "1.0", "--color", "always", path]) == 0
    assert capsys.readouterr().out == "1.00 [1.0]*\n"


def test_score_color_never(global_settings, samples_file, capsys, monkeypatch):
    monkeypatch.setattr(sys.stdout, "isatty", lambda: True)
    monkeypatch.setenv("TERM", "xterm")
    path = samples_file([0.5] * 100)

    assert _run(["score", "-t", "1.0", "--color", "never", path]) == 0
    assert capsys.readouterr().out == "1.00 [1.0]\n"


def test_score_color_auto_terminal(global_settings, samples_file, capsys, monkeypatch):
    monkeypatch.setattr(sys.stdout, "isatty", lambda: True)
    monkeypatch.setenv("TERM", "xterm")
    path = samples_file([10.0] * 100)

    assert _run(["score", "-t", "1.0", path]) == 0
    assert capsys.readouterr().out.startswith("\033[31m0.00 [1.0]")


def test_score_color_auto_respects_no_color(global_settings, samples_file, capsys, monkeypatch):
    monkeypatch.setattr(sys.stdout, "isatty", lambda: True)
    monkeypatch.setenv("TERM", "xterm")
    monkeypatch.setenv("NO_COLOR", "1")
    path = samples_file([0.1] * 200)

    assert _run(["score", "-t", "1.0", path]) == 0
    assert capsys.readouterr().out == "1.00 [1.0]\n"


def test_score_per_file_color(global_settings, samples_file, capsys):
    path = samples_file([0.5] * 100)

    assert _run(["score", "-t", "1.0", "--color", "always", "--per-file", path]) == 0

    first = capsys.readouterr().out.splitlines()[0]
    assert first.startswith("%s: \033[36m1.00 [1.0]" % path)


def test_score_invalid_utf8_line_skipped(global_settings, tmp_path, capsys):
    path = tmp_path / "times.txt"
    path.write_bytes(b"0.5\n\xff\xfe\n10.0\n")

    assert _run(["score", "-t", "1.0", str(path)]) == 0
    assert capsys.readouterr().out == "0.50 [1.0]*\n"


def test_score_invalid_utf8_line_strict(global_settings, tmp_path, capsys):
    path = tmp_path / "times.txt"
    path.write_bytes(b"0.5\n\xff\xfe\n10.0\n")

    assert _run(["score", "-t", "1.0", "--strict", str(path)]) == 1
    assert "ERROR:" in capsys.readouterr().err


def test_external_plugin_command(global_settings, capsys, monkeypatch):
    import importlib.metadata

    import apdex.admin

    entrypoint = importlib.metadata.EntryPoint(
        name="sample-count", value="_test_admin_plugin:sample_count", group="apdex.admin"
    )

    def entry_points(group=None):
        assert group == "apdex.admin"
        return [entrypoint]

    monkeypatch.setattr(importlib.metadata, "entry_points", entry_points)
    monkeypatch.setattr(apdex.admin, "_commands", dict(apdex.admin._commands))
    monkeypatch.delitem(sys.modules, "_test_admin_plugin", raising=False)

    apdex.admin.load_external_plugins()

    assert _run(["sample-count", "0.5", "2.0", "10.0"]) == 0
    assert capsys.readouterr().out == "3\n"


def test_score_with_config(global_settings, ini_file, samples_file, capsys):
    config = ini_file()
    path = samples_file([0.4, 0.5, 1.0])

    assert _run(["score", "-c", config, "-e", "production", path]) == 0
    assert capsys.readouterr().out == "0.83 [0.5]*\n"


def test_score_command_line_overrides_config(global_settings, ini_file, samples_file, capsys):
    config = ini_file()
    path = samples_file([0.4, 0.5, 1.0])

    assert _run(["score", "-c", config, "-e", "production", "-t", "2.0", path]) == 0
    assert capsys.readouterr().out == "1.00 [2.0]*\n"


def test_score_skips_invalid_lines(global_settings, samples_file, capsys):
    path = samples_file([0.5, "bogus", 10.0])

    assert _run(["score", "-t", "1.0", path]) == 0
    assert capsys.readouterr().out == "0.50 [1.0]*\n"


def test_score_strict(global_settings, samples_file, capsys):
    path = samples_file([0.5, "bogus", 10.0])

    assert _run(["score", "-t", "1.0", "--strict", path]) == 1
    assert "ERROR:" in capsys.readouterr().err


@pytest.mark.parametrize("threshold", ["0", "-1"])
def test_score_invalid_threshold(global_settings, samples_file, capsys, threshold):
    path = samples_file([0.5])

    assert _run(["score", "-t", threshold, path]) == 1
    assert "threshold" in capsys.readouterr().err


def test_score_invalid_hit_rate(global_settings, samples_file, capsys):
    assert _run(["score", "-t", "1.0", "--hit-rate", "1.0", samples_file([0.5])]) == 1
    assert "hit rate" in capsys.readouterr().err


def test_score_missing_file(global_settings, tmp_path, capsys):
    assert _run(["score", "-t", "1.0", str(tmp_path / "missing.txt")]) == 1
    assert "ERROR:" in capsys.readouterr().err


def test_score_no_files(global_settings, capsys):
    assert _run(["score", "-t", "1.0"]) == 1
    assert "Usage: apdex-admin score" in capsys.readouterr().out


def test_score_bad_option(global_settings, capsys):
    assert _run(["score", "--threshold", "fast", "times.txt"]) == 1
    assert "Usage: apdex-admin score" in capsys.readouterr().out


def test_score_bad_config(global_settings, ini_file, samples_file, capsys):
    config = ini_file("[apdex]\napdex_t = never\n")

    assert _run(["score", "-c", config, samples_file([0.5])]) == 1
    assert "ERROR:" in capsys.readouterr().err


def test_local_config(global_settings, ini_file, capsys):
    assert _run(["local-config", ini_file(), "production"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert "apdex_t = 0.5" in out
    assert "apdex_f = 2.0" in out
    assert "samples.ignore_invalid = False" in out


def test_local_config_usage(global_settings, capsys):
    assert _run(["local-config"]) == 1
    assert "Usage: apdex-admin local-config" in capsys.readouterr().out


def test_generate_config(global_settings, capsys):
    assert _run(["generate-config", "0.25"]) == 0

    out = capsys.readouterr().out
    assert "[apdex]" in out
    assert "apdex_t = 0.25" in out


def test_generate_config_to_file(global_settings, tmp_path, capsys):
    output = tmp_path / "apdex.ini"

    assert _run(["generate-config", "2.0", str(output)]) == 0
    assert "apdex_t = 2.0" in output.read_text()


def test_generate_config_invalid_threshold(global_settings, capsys):
    assert _run(["generate-config", "-1"]) == 1
    assert "Usage: apdex-admin generate-config" in capsys.readouterr().out


def test_generated_config_loads(global_settings, tmp_path, samples_file, capsys):
    output = tmp_path / "generated.ini"
    assert _run(["generate-config", "1.0", str(output)]) == 0

    path = samples_file([0.5, 2.0, 10.0])

    assert _run(["score", "-c", str(output), "--color", "never", path]) == 0
    assert capsys.readouterr().out.splitlines()[-1] == "0.50 [1.0]*"
