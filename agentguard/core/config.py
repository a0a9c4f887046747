"""Configuration loading and validation."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from agentguard.core.decision_engine import DecisionThresholds
from agentguard.models import Guardrails

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration is invalid."""

    pass


@dataclass
class RpcConfig:
    """Ledger RPC endpoint configuration."""

    url: str
    commitment: str = "confirmed"
    timeout_seconds: float = 30.0


@dataclass
class AnalyzerConfig:
    """One analyzer registered with the decision engine."""

    name: str
    class_path: str
    weight: float = 1.0
    enabled: bool = True
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class DecisionConfig:
    """Decision engine configuration."""

    thresholds: DecisionThresholds
    analyzers: list[AnalyzerConfig] = field(default_factory=list)


@dataclass
class Config:
    """Main configuration container."""

    rpc: RpcConfig
    guardrails: Guardrails | None
    decision: DecisionConfig

    def get_enabled_analyzers(self) -> list[AnalyzerConfig]:
        """Get list of enabled analyzers."""
        return [a for a in self.decision.analyzers if a.enabled]


def _mint_list(raw: dict, key: str) -> tuple[str, ...] | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ConfigError(f"guardrails.{key} must be a list of mint addresses")
    return tuple(str(mint) for mint in value)


def _parse_guardrails(raw: dict | None) -> Guardrails | None:
    if raw is None:
        return None

    max_amount = raw.get("max_amount")
    if max_amount is not None and max_amount <= 0:
        raise ConfigError(f"guardrails.max_amount must be positive, got {max_amount}")

    max_slippage_bps = raw.get("max_slippage_bps")
    if max_slippage_bps is not None and max_slippage_bps < 0:
        raise ConfigError(
            f"guardrails.max_slippage_bps must not be negative, got {max_slippage_bps}"
        )

    return Guardrails(
        max_amount=max_amount,
        max_slippage_bps=max_slippage_bps,
        allowed_mints=_mint_list(raw, "allowed_mints"),
        blocked_mints=_mint_list(raw, "blocked_mints"),
    )


def _parse_decision(raw: dict) -> DecisionConfig:
    defaults = DecisionThresholds()
    thr_raw = raw.get("thresholds") or {}
    thresholds = DecisionThresholds(
        execute_score=thr_raw.get("execute_score", defaults.execute_score),
        execute_confidence=thr_raw.get("execute_confidence", defaults.execute_confidence),
        reject_score=thr_raw.get("reject_score", defaults.reject_score),
        escalate_confidence=thr_raw.get("escalate_confidence", defaults.escalate_confidence),
    )

    analyzers = []
    for analyzer_raw in raw.get("analyzers", []):
        try:
            analyzer = AnalyzerConfig(
                name=analyzer_raw["name"],
                class_path=analyzer_raw["class_path"],
                weight=analyzer_raw.get("weight", 1.0),
                enabled=analyzer_raw.get("enabled", True),
                params=analyzer_raw.get("params", {}),
            )
        except KeyError as e:
            raise ConfigError(f"Analyzer entry missing required field: {e}") from e

        if analyzer.weight <= 0:
            raise ConfigError(
                f"Analyzer {analyzer.name} weight must be positive, got {analyzer.weight}"
            )
        analyzers.append(analyzer)

    return DecisionConfig(thresholds=thresholds, analyzers=analyzers)


def load_config(path: str) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Config object with validated configuration

    Raises:
        ConfigError: If file not found, invalid YAML, or missing required fields
    """
    config_path = Path(path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    if raw is None:
        raise ConfigError("Configuration file is empty")

    required_sections = ["rpc", "guardrails", "decision"]
    for section in required_sections:
        if section not in raw:
            raise ConfigError(f"Missing required configuration section: {section}")

    rpc_raw = raw["rpc"] or {}
    if "url" not in rpc_raw:
        raise ConfigError("Missing required field: rpc.url")
    rpc = RpcConfig(
        url=rpc_raw["url"],
        commitment=rpc_raw.get("commitment", "confirmed"),
        timeout_seconds=rpc_raw.get("timeout_seconds", 30.0),
    )

    guardrails = _parse_guardrails(raw["guardrails"])
    decision = _parse_decision(raw["decision"] or {})

    config = Config(rpc=rpc, guardrails=guardrails, decision=decision)

    logger.info(f"Loaded configuration from {path}")
    logger.debug(f"RPC: {rpc.url} ({rpc.commitment})")
    logger.debug(f"Guardrails: {guardrails}")
    logger.debug(f"Analyzers: {[a.name for a in config.get_enabled_analyzers()]}")

    return config
