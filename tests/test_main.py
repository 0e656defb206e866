import io

import pytest

from nekolink import main as main_module
from nekolink.generators.nekoray_link import decode_link
from nekolink.main import UsageError, main, parse_args
from nekolink.ui.console import ConsoleUI


def scripted_input(answers):
    """input() replacement that replays answers, then raises EOFError."""
    it = iter(answers)

    def fake_input(prompt=""):
        try:
            return next(it)
        except StopIteration:
            raise EOFError

    return fake_input


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(main_module, "setup_logging", lambda level="INFO": None)


def make_ui(answers=()):
    return ConsoleUI(input_fn=scripted_input(answers), stream=io.StringIO())


def test_parse_args_modes() -> None:
    assert parse_args([])["mode"] == "interactive"
    assert parse_args(["--help"])["mode"] == "help"
    assert parse_args(["-v"])["mode"] == "version"

    batch = parse_args(["--batch", "ips.txt", "--mtu", "1300", "--no-progress"])
    assert batch["mode"] == "batch"
    assert batch["overrides"] == {"endpoints_file": "ips.txt", "mtu": "1300", "show_progress": False}

    assert parse_args(["--batch", "--prefix", "CN"])["overrides"] == {"name_prefix": "CN"}

    tokens = parse_args(["1.1.1.1:1", "--config", "a.conf", "[::1]:2"])
    assert tokens["mode"] == "tokens"
    assert tokens["tokens"] == ["1.1.1.1:1", "[::1]:2"]
    assert tokens["overrides"] == {"config_file": "a.conf"}


@pytest.mark.parametrize("argv", [["--mtu"], ["--bogus"], ["--batch", "f.txt", "1.1.1.1:1"]])
def test_parse_args_usage_errors(argv) -> None:
    with pytest.raises(UsageError):
        parse_args(argv)


def test_usage_error_exit_code(capsys) -> None:
    assert main(["--frobnicate"]) == 2
    assert "unknown option" in capsys.readouterr().err


def test_help_and_version(capsys) -> None:
    assert main(["--help"]) == 0
    assert "--batch" in capsys.readouterr().out
    assert main(["--version"]) == 0
    assert "NekoLink v" in capsys.readouterr().out


def test_batch_run_writes_output(tmp_path, warp_conf_file) -> None:
    endpoints = tmp_path / "endpoints.txt"
    endpoints.write_text(
        "162.159.192.1:2408\n\nbadtoken\n[2606:4700:d0::1]:2408\nengage.cloudflareclient.com 2408\n",
        encoding="utf-8",
    )
    output = tmp_path / "out.txt"
    ui = make_ui()
    rc = main([
        "--config", str(warp_conf_file), "--batch", str(endpoints),
        "--output", str(output), "--prefix", "CN", "--no-progress",
    ], ui=ui)
    assert rc == 0

    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    names = [decode_link(line)["name"] for line in lines]
    assert names == [
        "CN_162.159.192.1:2408",
        "CN_[2606:4700:d0::1]:2408",
        "CN_engage.cloudflareclient.com:2408",
    ]
    # MTU comes from the config file when no override is given.
    assert decode_link(lines[0])["outbound"]["mtu"] == 1280
    shown = ui.stream.getvalue()
    assert "badtoken" in shown
    assert "unrecognized format" in shown


def test_batch_run_without_valid_endpoints_writes_nothing(tmp_path, warp_conf_file) -> None:
    endpoints = tmp_path / "endpoints.txt"
    endpoints.write_text("nope\nstill nope here\n", encoding="utf-8")
    output = tmp_path / "out.txt"
    rc = main(["--config", str(warp_conf_file), "--batch", str(endpoints),
               "--output", str(output), "--no-progress"], ui=make_ui())
    assert rc == 1
    assert not output.exists()


def test_batch_run_reports_status_lines_alongside_progress_bar(tmp_path, warp_conf_file) -> None:
    endpoints = tmp_path / "endpoints.txt"
    endpoints.write_text("162.159.192.1:2408\nbadtoken\n", encoding="utf-8")
    ui = make_ui()
    rc = main(["--config", str(warp_conf_file), "--batch", str(endpoints),
               "--output", str(tmp_path / "out.txt")], ui=ui)
    assert rc == 0
    shown = ui.stream.getvalue()
    assert "[+]" in shown and "162.159.192.1:2408" in shown
    assert "[x]" in shown and "badtoken (unrecognized format)" in shown


def test_batch_run_unwritable_output_is_fatal(tmp_path, warp_conf_file, caplog) -> None:
    endpoints = tmp_path / "endpoints.txt"
    endpoints.write_text("162.159.192.1:2408\n", encoding="utf-8")
    # A directory cannot be opened for writing.
    rc = main(["--config", str(warp_conf_file), "--batch", str(endpoints),
               "--output", str(tmp_path), "--no-progress"], ui=make_ui())
    assert rc == 1
    assert "Cannot write output file" in caplog.text


def test_batch_run_missing_endpoint_file(tmp_path, warp_conf_file) -> None:
    rc = main(["--config", str(warp_conf_file), "--batch", str(tmp_path / "none.txt")], ui=make_ui())
    assert rc == 1


def test_missing_config_file_is_fatal(tmp_path) -> None:
    ui = make_ui()
    rc = main(["--config", str(tmp_path / "absent.conf"), "1.1.1.1:1"], ui=ui)
    assert rc == 1
    assert "nekoray://" not in ui.stream.getvalue()


def test_incomplete_config_is_fatal(tmp_path) -> None:
    conf = tmp_path / "wg.conf"
    conf.write_text("[Interface]\nPrivateKey = a\nAddress = 10.0.0.2/32\n", encoding="utf-8")
    assert main(["--config", str(conf), "1.1.1.1:1"], ui=make_ui()) == 1


def test_pause_on_exit(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("NEKOLINK_PAUSE", "1")
    prompts = []

    def fake_input(prompt=""):
        prompts.append(prompt)
        return ""

    ui = ConsoleUI(input_fn=fake_input, stream=io.StringIO())
    assert main(["--config", str(tmp_path / "absent.conf"), "1.1.1.1:1"], ui=ui) == 1
    assert any("Enter" in p for p in prompts)


def test_token_mode_prints_links(warp_conf_file) -> None:
    ui = make_ui()
    rc = main(["--config", str(warp_conf_file), "--mtu", "1400", "162.159.192.1:2408", "bad"], ui=ui)
    assert rc == 0
    uris = [line for line in ui.stream.getvalue().splitlines() if line.startswith("nekoray://")]
    assert len(uris) == 1
    assert decode_link(uris[0])["outbound"]["mtu"] == 1400


def test_token_mode_ignores_out_of_range_mtu(warp_conf_file) -> None:
    ui = make_ui()
    assert main(["--config", str(warp_conf_file), "--mtu", "1501", "1.1.1.1:1"], ui=ui) == 0
    uri = [line for line in ui.stream.getvalue().splitlines() if line.startswith("nekoray://")][0]
    assert decode_link(uri)["outbound"]["mtu"] == 1280


def test_interactive_session(warp_conf_file) -> None:
    ui = make_ui([
        "1501",                      # rejected MTU, asked again
        "1300",                      # accepted MTU
        "not an endpoint at all",    # rejected, asked again
        "[2606:4700:d0::1]:2408",
        "CN",
        "162.159.192.1:2408",
        "",
    ])
    assert main(["--config", str(warp_conf_file)], ui=ui) == 0

    out = ui.stream.getvalue()
    assert "MTU must be an integer" in out
    assert "Not a valid endpoint" in out
    uris = [line for line in out.splitlines() if line.startswith("nekoray://")]
    assert [decode_link(u)["name"] for u in uris] == [
        "CN_[2606:4700:d0::1]:2408",
        "162.159.192.1:2408",
    ]
    assert all(decode_link(u)["outbound"]["mtu"] == 1300 for u in uris)


def test_interactive_session_default_mtu(tmp_path) -> None:
    conf = tmp_path / "wg.conf"
    conf.write_text("PrivateKey = a\nPublicKey = b\nAddress = 10.0.0.2/32\n", encoding="utf-8")
    ui = make_ui(["", "1.1.1.1:1", ""])
    assert main(["--config", str(conf)], ui=ui) == 0
    uri = [line for line in ui.stream.getvalue().splitlines() if line.startswith("nekoray://")][0]
    outbound = decode_link(uri)["outbound"]
    assert outbound["mtu"] == 1408
    assert outbound["local_address"] == "10.0.0.2/32"
