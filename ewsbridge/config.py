import json
import logging
import os

"""
Reading of the ewsbridge configuration file.

The file is JSON (or YAML, if pyyaml is installed) holding one mapping per
section.  A section holds connection parameters prefixed with ``ews_``
(``ews_endpoint``, ``ews_username``, ``ews_password``, ...) and may name
another section under ``inherits``.
"""

log = logging.getLogger(__name__)

## short forms accepted in config files
KEY_ALIASES = {"user": "username", "pass": "password", "url": "endpoint"}


def config_files():
    """The places searched when no config file is given, in order"""
    cfgdir = f"{os.environ.get('HOME', '/')}/.config"
    return (
        f"{cfgdir}/ewsbridge/ews.conf",
        f"{cfgdir}/ewsbridge/ews.yaml",
        f"{cfgdir}/ewsbridge/ews.json",
        f"{cfgdir}/ews.conf",
        "/etc/ewsbridge/ews.conf",
    )


def config_section(config, section="default"):
    """The section with everything it inherits merged in, own keys winning"""
    if section in config and "inherits" in config[section]:
        ret = config_section(config, config[section]["inherits"])
    else:
        ret = {}
    if section in config:
        ret.update(config[section])
    return ret


def connection_params(section):
    """
    ``{"ews_url": ..., "ews_user": ..., "inherits": ...}`` ->
    ``{"endpoint": ..., "username": ...}``, ready for EwsClient
    """
    params = {}
    for key, value in section.items():
        if not key.startswith("ews_") or not value:
            continue
        key = key[4:]
        params[KEY_ALIASES.get(key, key)] = value
    return params


def _load(fn):
    with open(fn, "rb") as config_file:
        raw = config_file.read()
    try:
        return json.loads(raw)
    except json.decoder.JSONDecodeError:
        pass
    ## Late import.  yaml is an external module, and only an extra
    ## requirement.
    try:
        import yaml
    except ImportError:
        log.error(f"config file {fn} is not valid json, and pyyaml is not installed.")
        return {}
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        log.error(f"config file {fn} is neither valid json nor yaml.  Check the syntax.")
        return {}


def read_config(fn):
    """
    Read the config file ``fn``, or the first existing file of
    :func:`config_files`.  A missing or broken file gives ``{}``.
    """
    if not fn:
        for config_file in config_files():
            cfg = read_config(config_file)
            if cfg:
                return cfg
        return {}

    try:
        cfg = _load(fn)
    except FileNotFoundError:
        log.debug("no config file at %s", fn)
        return {}
    if not isinstance(cfg, dict):
        log.error(f"config file {fn} does not hold a mapping of sections, it will be ignored")
        return {}
    return cfg
