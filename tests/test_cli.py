"""
Tests for the markovbox command line.
"""
import json

import pytest

from markovbox.cli import EXIT_EMPTY_NAME, EXIT_MISSING_INPUT, EXIT_WRITE_FAILED, main, parse_args
from markovbox.services.packager import extract_payload


class TestParseArgs:

    def test_positionals_and_defaults(self):
        args = parse_args(["demo", "out.py", "a.txt", "b.txt"])

        assert args.name == "demo"
        assert args.output_file == "out.py"
        assert args.files == ["a.txt", "b.txt"]
        assert args.level == 4
        assert not (args.tokenize or args.strip or args.uncompressed or args.save_json)

    def test_flags(self):
        args = parse_args(
            ["--level", "2", "--sentences", "--strip", "--uncompressed", "--save-json", "demo", "out.py", "a.txt"]
        )

        assert args.level == 2
        assert args.tokenize and args.strip and args.uncompressed and args.save_json

    @pytest.mark.parametrize("level", ["0", "-1", "two"])
    def test_bad_level_exits(self, level):
        with pytest.raises(SystemExit) as exc:
            parse_args(["--level", level, "demo", "out.py", "a.txt"])

        assert exc.value.code == 2

    def test_requires_a_dictionary(self):
        with pytest.raises(SystemExit):
            parse_args(["demo", "out.py"])


class TestMain:

    def test_builds_artifact(self, corpus_files, tmp_path):
        output = tmp_path / "demo.py"

        code = main(["--level", "2", "--sentences", "--save-json", "demo", str(output)] + [str(p) for p in corpus_files])

        assert code == 0
        assert json.loads(extract_payload(output.read_text(encoding="utf-8")))["name"] == "demo"
        assert (tmp_path / "demo.py.json").exists()

    def test_missing_dictionary(self, tmp_path):
        code = main(["demo", str(tmp_path / "demo.py"), str(tmp_path / "missing.txt")])

        assert code == EXIT_MISSING_INPUT
        assert not (tmp_path / "demo.py").exists()

    def test_directory_dictionary(self, tmp_path):
        assert main(["demo", str(tmp_path / "demo.py"), str(tmp_path)]) == EXIT_MISSING_INPUT

    def test_empty_name(self, corpus_files, tmp_path):
        code = main(["  ", str(tmp_path / "demo.py"), str(corpus_files[0])])

        assert code == EXIT_EMPTY_NAME

    def test_unwritable_output(self, corpus_files, tmp_path):
        code = main(["demo", str(tmp_path / "nowhere" / "demo.py"), str(corpus_files[0])])

        assert code == EXIT_WRITE_FAILED
