import json
import os
import yaml


def load_config(path: str) -> dict:
    """
    Load a simulation configuration file (YAML or JSON) and return it as a dictionary.

    Relative paths found under ``traders[*].trades_csv`` are resolved against the
    directory of the config file, so a config and its trade scripts can be moved
    together.

    Parameters
    ----------
    path : str
        The path to the configuration file.

    Returns
    -------
    dict
        Parsed configuration data.

    Raises
    ------
    FileNotFoundError
        If the file does not exist at the given path.

    ValueError
        - If the file extension is unsupported.
        - If the file content is not a dictionary.
        - If the config fails :func:`validate_config`.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    _, ext = os.path.splitext(path.lower())

    if ext in (".yaml", ".yml"):
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    elif ext == ".json":
        with open(path, "r") as f:
            data = json.load(f)
    else:
        raise ValueError("Unsupported config extension. Use .yaml, .yml, or .json.")

    if not isinstance(data, dict):
        raise ValueError("Config file root must be a dictionary.")

    base_dir = os.path.dirname(os.path.abspath(path))
    for trader in data.get("traders", []) or []:
        csv_path = trader.get("trades_csv")
        if csv_path and not os.path.isabs(csv_path):
            trader["trades_csv"] = os.path.join(base_dir, csv_path)

    validate_config(data)
    return data


def validate_config(config: dict) -> None:
    """
    Check the parts of a config the model cannot default.

    Parameters
    ----------
    config : dict
        Parsed configuration.

    Raises
    ------
    ValueError
        If ``tokens`` does not list exactly two tokens with distinct addresses,
        or a trader uses an unknown mode.
    """
    tokens = config.get("tokens")
    if not isinstance(tokens, list) or len(tokens) != 2:
        raise ValueError("Config must list exactly two tokens under 'tokens'.")
    addresses = [t.get("address") for t in tokens]
    if not all(addresses) or addresses[0] == addresses[1]:
        raise ValueError("Token addresses must be present and distinct.")

    for trader in config.get("traders", []) or []:
        mode = trader.get("mode", "random")
        if mode not in ("random", "csv"):
            raise ValueError(f"Unsupported trader mode: {mode}")
        if mode == "csv" and not trader.get("trades_csv"):
            raise ValueError("CSV traders require 'trades_csv'.")
