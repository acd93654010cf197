#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import sys

import pytest
import yaml

from awsenv import cli

AWS_VARS = [
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SESSION_TOKEN",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
]


@pytest.fixture
def user_config(tmp_path, monkeypatch):
    for var in AWS_VARS:
        monkeypatch.delenv(var, raising=False)

    path = tmp_path / "awsenv.yaml"
    monkeypatch.setenv("AWSENV_CONFIG", str(path))

    def write(conf):
        with path.open("w") as f:
            yaml.dump(conf, f)

    write({"Connection": {"credential": "profile:sts", "region": "eu-west-1"}})
    return write


@pytest.fixture
def run(mocker, credential_store, user_config):
    mocker.patch("awsenv.plugins.creds.ProfileCredentialStore", return_value=credential_store)
    run = mocker.patch("awsenv.cli.subprocess.run")
    run.return_value.returncode = 3
    return run


def launched_env(run):
    return run.call_args[1]["env"]


def test_explicit_connection(run):
    status = cli._cli(
        ["--region", "us-east-1", "--credential", "profile:default", "--", "aws", "s3", "ls"]
    )
    assert status == 3
    assert run.call_args[0][0] == ["aws", "s3", "ls"]
    env = launched_env(run)
    assert env["AWS_ACCESS_KEY_ID"] == "AKIADEFAULT"
    assert env["AWS_DEFAULT_REGION"] == "us-east-1"
    assert "AWS_SESSION_TOKEN" not in env


def test_command_flags_are_not_parsed(run):
    cli._cli(["--use-current", "--", "aws", "--region", "us-west-2", "ec2"])
    assert run.call_args[0][0] == ["aws", "--region", "us-west-2", "ec2"]
    assert launched_env(run)["AWS_REGION"] == "eu-west-1"


def test_failed_resolution_still_launches(run):
    assert cli._cli(["--region", "us-east-1", "--", "make"]) == 3
    env = launched_env(run)
    assert not any(var in env for var in AWS_VARS)


def test_unconfigured_launch_has_no_connection(run):
    cli._cli(["--", "make"])
    assert "AWS_ACCESS_KEY_ID" not in launched_env(run)


def test_always_setting_uses_current_connection(run, user_config):
    user_config(
        {
            "Settings": {"inject_credentials": "Always"},
            "Connection": {"credential": "profile:sts", "region": "eu-west-1"},
        }
    )
    cli._cli(["--", "make"])
    assert launched_env(run)["AWS_SESSION_TOKEN"] == "sts-token"


def test_save_and_reload(run, tmp_path):
    path = tmp_path / "deploy.xml"
    cli._cli(
        ["--run-config", str(path), "--use-current", "--env", "STAGE=prod", "--save",
         "--", "make", "deploy"]
    )
    assert path.exists()

    run.reset_mock()
    cli._cli(["--run-config", str(path)])
    assert run.call_args[0][0] == ["make", "deploy"]
    env = launched_env(run)
    assert env["STAGE"] == "prod"
    assert env["AWS_SESSION_TOKEN"] == "sts-token"


def test_flags_override_saved_connection(run, tmp_path):
    path = tmp_path / "deploy.xml"
    cli._cli(["--run-config", str(path), "--use-current", "--save", "--", "make"])
    cli._cli(
        ["--run-config", str(path), "--region", "us-east-1",
         "--credential", "profile:default"]
    )
    assert launched_env(run)["AWS_ACCESS_KEY_ID"] == "AKIADEFAULT"


def test_print_env(run, capsys):
    assert cli._cli(["--use-current", "--print-env"]) == 0
    out = capsys.readouterr().out
    assert "export AWS_ACCESS_KEY_ID=ASIASTS\n" in out
    assert "export AWS_REGION=eu-west-1\n" in out
    run.assert_not_called()


def test_print_env_omits_inherited_variables(run, capsys, monkeypatch):
    monkeypatch.setenv("AWS_PROFILE", "parent-shell")
    assert cli._cli(["--use-current", "--print-env"]) == 0
    out = capsys.readouterr().out
    assert "AWS_PROFILE" not in out
    assert "export AWS_SESSION_TOKEN=sts-token\n" in out


def test_print_env_after_failed_resolution_prints_nothing(run, capsys, monkeypatch):
    monkeypatch.setenv("AWS_PROFILE", "parent-shell")
    assert cli._cli(["--region", "us-east-1", "--print-env"]) == 0
    assert capsys.readouterr().out == ""
    run.assert_not_called()


def test_list_regions(run, capsys):
    assert cli._cli(["--list-regions"]) == 0
    assert "us-east-1" in capsys.readouterr().out


def test_list_credentials(run, capsys):
    assert cli._cli(["--list-credentials"]) == 0
    assert "profile:default" in capsys.readouterr().out


def test_save_requires_run_config(run):
    with pytest.raises(SystemExit):
        cli._cli(["--save", "--", "make"])


def test_no_command(run):
    with pytest.raises(SystemExit):
        cli._cli(["--use-current"])


def test_main_reports_config_errors(run, user_config, monkeypatch, capsys):
    user_config({"Settings": {"inject_credentials": "On"}})
    monkeypatch.setattr(sys, "argv", ["awsenv", "--", "make"])
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 1
    assert "inject_credentials" in capsys.readouterr().err


def test_main_exits_with_command_status(run, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["awsenv", "--", "make"])
    with pytest.raises(SystemExit) as excinfo:
        cli.main()
    assert excinfo.value.code == 3
