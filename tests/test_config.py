import json

from ewsbridge import config

CONFIG = {
    "default": {"ews_url": "https://mail.example.com/EWS/Exchange.asmx"},
    "work_main": {"inherits": "default", "ews_user": "alice", "ews_pass": "secret"},
    "work_shared": {
        "inherits": "work_main",
        "ews_impersonation_type": "primary_smtp_address",
        "ews_impersonation_mail": "shared@example.com",
        "ews_proxy": "",
        "comment": "the shared mailbox",
    },
}


def test_config_section_inherits():
    section = config.config_section(CONFIG, "work_shared")
    assert section["ews_url"] == "https://mail.example.com/EWS/Exchange.asmx"
    assert section["ews_user"] == "alice"
    assert section["ews_impersonation_mail"] == "shared@example.com"
    assert config.config_section(CONFIG, "missing") == {}


def test_own_keys_win():
    cfg = {"base": {"ews_user": "bob"}, "child": {"inherits": "base", "ews_user": "carol"}}
    assert config.config_section(cfg, "child")["ews_user"] == "carol"


def test_connection_params():
    params = config.connection_params(config.config_section(CONFIG, "work_shared"))
    assert params == {
        "endpoint": "https://mail.example.com/EWS/Exchange.asmx",
        "username": "alice",
        "password": "secret",
        "impersonation_type": "primary_smtp_address",
        "impersonation_mail": "shared@example.com",
    }


def test_read_config_json(tmp_path):
    fn = tmp_path / "ews.json"
    fn.write_text(json.dumps(CONFIG))
    assert config.read_config(str(fn)) == CONFIG


def test_read_config_missing_file(tmp_path):
    assert config.read_config(str(tmp_path / "nothere.conf")) == {}


def test_read_config_not_sections(tmp_path):
    fn = tmp_path / "ews.json"
    fn.write_text(json.dumps(["not", "sections"]))
    assert config.read_config(str(fn)) == {}


def test_default_locations(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    cfgdir = tmp_path / ".config" / "ewsbridge"
    cfgdir.mkdir(parents=True)
    (cfgdir / "ews.json").write_text(json.dumps(CONFIG))
    assert config.read_config(None) == CONFIG
