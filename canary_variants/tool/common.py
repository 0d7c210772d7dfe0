"""Common utilities for commands."""

from argparse import ArgumentParser
import logging
import pathlib
from typing import Any

from canary_variants.config import StrategyConfig, load_config
from canary_variants.kubectl import KUBECTL_BIN, Kubectl

_LOGGER = logging.getLogger(__name__)


def add_cluster_flags(args: ArgumentParser) -> None:
    """Add flags for connecting to the cluster."""
    args.add_argument(
        "--namespace",
        "-n",
        help="Namespace of the resources in the cluster",
        default=None,
    )
    args.add_argument(
        "--kubeconfig",
        help="Path to the kubeconfig file used by kubectl",
        default=None,
    )
    args.add_argument(
        "--kubectl-bin",
        help="Path to the kubectl binary",
        default=KUBECTL_BIN,
    )


def build_kubectl(**kwargs: Any) -> Kubectl:
    """Return a Kubectl client from the cluster flags."""
    return Kubectl(
        namespace=kwargs.get("namespace"),
        kubeconfig=kwargs.get("kubeconfig"),
        kubectl_bin=kwargs.get("kubectl_bin") or KUBECTL_BIN,
    )


def add_strategy_flags(args: ArgumentParser) -> None:
    """Add flags for the deployment strategy configuration."""
    args.add_argument(
        "--config",
        help="Path to a yaml file with the strategy configuration",
        type=pathlib.Path,
        default=None,
    )
    args.add_argument(
        "--strategy",
        help="Deployment strategy e.g. canary, overrides the config file",
        default=None,
    )
    args.add_argument(
        "--traffic-split-method",
        help="Traffic split method e.g. pod or smi, overrides the config file",
        default=None,
    )


async def build_strategy_config(**kwargs: Any) -> StrategyConfig:
    """Return the strategy configuration from the config file and flags."""
    config = StrategyConfig()
    if config_path := kwargs.get("config"):
        config = await load_config(config_path)
    if strategy := kwargs.get("strategy"):
        config.deployment_strategy = strategy
    if method := kwargs.get("traffic_split_method"):
        config.traffic_split_method = method
    _LOGGER.debug("Strategy configuration: %s", config)
    return config
