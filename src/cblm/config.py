# src/cblm/config.py
from dataclasses import dataclass, asdict
import os
from typing import Dict, Any

import yaml
from dotenv import load_dotenv

# .env values never override variables already set in the environment
load_dotenv(override=False)

# 0-indexed position of the node name in a BLM row (the 4th column)
NODE_NAME_COL = 3
CODE_HEADER = "Code"
BLM_SUFFIX = "-BLM.csv"
CBLM_SUFFIX = "-CBLM.csv"


def _env_bool(name, default=False):
    v = os.getenv(name)
    if v is None: return default
    return str(v).strip().lower() in {"1","true","yes","y","on"}


@dataclass(frozen=True)
class Settings:
    # -------- Table layout -----
    node_name_col: int    = int(os.getenv("CBLM_NODE_NAME_COL", str(NODE_NAME_COL)))
    code_header: str      = os.getenv("CBLM_CODE_HEADER", CODE_HEADER)

    # -------- Batch ------------
    input_suffix: str     = os.getenv("CBLM_INPUT_SUFFIX", BLM_SUFFIX)
    output_suffix: str    = os.getenv("CBLM_OUTPUT_SUFFIX", CBLM_SUFFIX)
    recursive: bool       = _env_bool("CBLM_RECURSIVE", False)

    # -------- IO ---------------
    encoding: str         = os.getenv("CBLM_ENCODING", "utf-8")
    run_metrics_csv: str  = os.getenv("RUN_METRICS_CSV", "")

    # -------- General ----------
    log_level: str        = os.getenv("LOG_LEVEL", "INFO")

    # helper: convert to dict (useful for logging)
    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validated(self) -> "Settings":
        """
        Coerce loosely typed values (YAML strings, env text) and reject ones
        the pipeline can't run with. Raises ValueError naming the field.
        """
        current = self.to_dict()
        try:
            current["node_name_col"] = int(current["node_name_col"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"node_name_col must be an integer, got {self.node_name_col!r}") from e
        if current["node_name_col"] < 0:
            raise ValueError(f"node_name_col must be >= 0, got {current['node_name_col']}")
        if isinstance(current["recursive"], str):
            current["recursive"] = current["recursive"].strip().lower() in {"1","true","yes","y","on"}
        for name in ("input_suffix", "output_suffix", "code_header", "encoding"):
            v = current[name]
            if not isinstance(v, str) or not v:
                raise ValueError(f"{name} must be a non-empty string, got {v!r}")
        return Settings(**current)  # type: ignore[arg-type]

    @staticmethod
    def from_overrides(**kwargs) -> "Settings":
        """
        Build Settings and apply runtime overrides (e.g., parsed CLI flags).
        Only keys that match fields will be overridden.
        """
        base = Settings()
        current = base.to_dict()
        current.update({k: v for k, v in kwargs.items() if k in current and v is not None})
        # rebuild frozen dataclass with updates
        return Settings(**current)  # type: ignore[arg-type]

    @staticmethod
    def from_yaml(path: str, **overrides) -> "Settings":
        """
        Load a YAML settings file (flat mapping of field -> value), then apply
        `overrides` on top. CLI flags beat the file, the file beats the env.
        """
        with open(path, "r", encoding="utf-8") as f:
            try:
                loaded = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Settings file {path} is not valid YAML: {e}") from e
        if not isinstance(loaded, dict):
            raise ValueError(f"Settings file {path} must contain a mapping, got {type(loaded).__name__}")
        merged = {k: v for k, v in loaded.items() if v is not None}
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return Settings.from_overrides(**merged)
