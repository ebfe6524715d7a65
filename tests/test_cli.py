"""Tests for CLI commands.

These tests verify argument parsing, output formatting, and that every
failure ends with a message on stdout and exit status 1.
"""

import pytest
import responses

from fixtures import BASE_URL, document_resource, token_resource
from parashift_cli.runner.main import (
    create_cli,
    format_token_header,
    format_token_row,
    main,
)
from parashift_cli.schemas import Rectangle, Resource, TextAttributes


class TestCLICommandRegistry:
    """Tests for CLI command registration."""

    def test_all_commands_registered(self):
        parser = create_cli()

        subparsers_action = None
        for action in parser._actions:
            if action.dest == "command":
                subparsers_action = action
                break

        assert subparsers_action is not None
        commands = list(subparsers_action.choices.keys())
        for name in ("images", "file", "tokens", "upload", "document", "config"):
            assert name in commands

    def test_global_profile_option(self):
        args = create_cli().parse_args(["-p", "staging", "tokens", "-d", "7"])

        assert args.profile == "staging"
        assert args.command == "tokens"
        assert args.document_id == 7

    def test_document_id_must_be_integer(self):
        with pytest.raises(SystemExit):
            create_cli().parse_args(["images", "-d", "abc"])

    def test_classification_scope_is_comma_separated(self):
        args = create_cli().parse_args(["upload", "a.pdf", "-s", "invoice, receipt"])

        assert args.classification_scope == ["invoice", "receipt"]

    def test_upload_scope_defaults_to_none(self):
        args = create_cli().parse_args(["upload", "a.pdf"])

        assert args.classification_scope is None

    def test_document_list_takes_ids(self):
        args = create_cli().parse_args(["document", "list", "1", "2"])

        assert args.document_ids == ["1", "2"]

    def test_no_command_returns_error(self, capsys):
        assert main([]) == 1


class TestTokenTable:
    """Tests for token table formatting."""

    def test_header(self):
        header = format_token_header()

        assert header.startswith("value" + " " * 25 + " confidence")
        assert header.endswith("top bottom left right")

    def test_missing_confidence_prints_zero(self):
        token = Resource(
            type="recognitions",
            id="1",
            attributes=TextAttributes(
                value="hi",
                coordinates=Rectangle(top=1, bottom=2, left=3, right=4),
                page_id="1",
            ),
        )

        assert format_token_row(token) == (
            "hi" + " " * 28 + " 0.00000000 1.00000000 2.00000000 3.00000000 4.00000000"
        )

    def test_long_values_are_not_truncated(self):
        value = "x" * 40
        token = Resource(
            type="recognitions",
            attributes=TextAttributes(
                value=value,
                coordinates=Rectangle(top=0, bottom=0, left=0, right=0),
                page_id="1",
                confidence=0.5,
            ),
        )

        assert format_token_row(token).startswith(value + " 0.50000000")


class TestCommands:
    """End-to-end command runs against mocked HTTP."""

    @responses.activate
    def test_tokens(self, config_file, capsys):
        responses.add(
            responses.GET,
            f"{BASE_URL}/v2/documents/42/recognitions",
            json={"data": [token_resource("hi", (1, 2, 3, 4))]},
            status=200,
        )

        assert main(["-c", str(config_file), "tokens", "-d", "42"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("value")
        assert "0.00000000" in lines[1]

    @responses.activate
    def test_tokens_for_missing_document(self, config_file, capsys):
        responses.add(
            responses.GET,
            f"{BASE_URL}/v2/documents/42/recognitions",
            json={"data": []},
            status=200,
        )

        assert main(["-c", str(config_file), "tokens", "-d", "42"]) == 1
        assert "Document 42 does not exist." in capsys.readouterr().out

    @responses.activate
    def test_images(self, config_file, tmp_path, capsys, sample_files_payload):
        responses.add(responses.GET, f"{BASE_URL}/v2/files/", json=sample_files_payload, status=200)
        responses.add(responses.GET, "https://files.parashift.test/p0.jpg", body=b"0")
        responses.add(responses.GET, "https://files.parashift.test/p1.jpg", body=b"1")
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        code = main(["-c", str(config_file), "images", "-d", "42", "-o", str(out_dir)])

        assert code == 0
        assert sorted(p.name for p in out_dir.iterdir()) == ["42-0.jpeg", "42-1.jpeg"]
        assert capsys.readouterr().out.count("Downloading") == 2

    @responses.activate
    def test_upload(self, config_file, tmp_path, capsys):
        source = tmp_path / "invoice.pdf"
        source.write_bytes(b"%PDF-1.4")
        responses.add(
            responses.POST,
            f"{BASE_URL}/v2/documents/",
            json={"data": document_resource("1001")},
            status=201,
        )

        assert main(["-c", str(config_file), "upload", str(source)]) == 0
        assert "Uploaded document 1001 to tenant 77." in capsys.readouterr().out

    @responses.activate
    def test_upload_rejected(self, config_file, tmp_path, capsys):
        source = tmp_path / "invoice.pdf"
        source.write_bytes(b"%PDF-1.4")
        responses.add(responses.POST, f"{BASE_URL}/v2/documents/", json={}, status=422)

        assert main(["-c", str(config_file), "upload", str(source)]) == 1
        assert "status code 422" in capsys.readouterr().out

    @responses.activate
    def test_document_list(self, config_file, capsys):
        responses.add(
            responses.GET,
            f"{BASE_URL}/v2/documents/",
            json={"data": [document_resource("1"), document_resource("2")]},
            status=200,
        )

        assert main(["-c", str(config_file), "document", "list", "1", "2"]) == 0
        assert capsys.readouterr().out.splitlines() == ["1", "2"]

    @responses.activate
    def test_named_profile_selects_domain(self, config_file):
        responses.add(
            responses.GET,
            "https://a.parashift.test/v2/documents/",
            json={"data": []},
            status=200,
        )

        assert main(["-c", str(config_file), "-p", "a", "document", "list", "1"]) == 0
        assert responses.calls[0].request.headers["Authorization"] == "token-a"

    def test_unknown_profile(self, config_file, capsys):
        assert main(["-c", str(config_file), "-p", "z", "tokens", "-d", "1"]) == 1
        assert 'No profile with name "z"' in capsys.readouterr().out

    def test_empty_profile_name(self, config_file, capsys):
        assert main(["-c", str(config_file), "-p", "", "config", "list"]) == 0
        assert main(["-c", str(config_file), "-p", "", "tokens", "-d", "1"]) == 1
        assert 'No profile with name ""' in capsys.readouterr().out

    def test_missing_config(self, tmp_path, capsys):
        assert main(["-c", str(tmp_path / "nope.yaml"), "tokens", "-d", "1"]) == 1
        assert "Unable to read config file" in capsys.readouterr().out

    def test_config_not_utf8(self, tmp_path, capsys):
        path = tmp_path / "pp.yaml"
        path.write_bytes(b"profiles:\n  - name: caf\xe9\n    default: true\n")

        assert main(["-c", str(path), "config", "list"]) == 1
        assert "Unable to parse config file" in capsys.readouterr().out

    def test_token_not_allowed_in_header(self, tmp_path, capsys):
        path = tmp_path / "pp.yaml"
        path.write_text(
            "profiles:\n  - {name: x, api_token: \"t\u20ac\", default: true}\n",
            encoding="utf-8",
        )

        assert main(["-c", str(path), "document", "list", "1"]) == 1
        assert "API token contains characters" in capsys.readouterr().out

    def test_config_list(self, config_file, capsys):
        assert main(["-c", str(config_file), "config", "list"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "a a.parashift.test token-a",
            "b api.parashift.test test-token-12345",
        ]

    def test_config_init_uses_home(self, tmp_path, capsys):
        assert main(["config", "init"]) == 0

        assert (tmp_path / "home" / ".parashift" / "pp.yaml").exists()
        assert main(["config", "init"]) == 1
        assert "already exists" in capsys.readouterr().out
