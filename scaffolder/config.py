"""Stack configuration schema and loaders."""

from dataclasses import dataclass

import pulumi

from scaffolder.models import (
    FargateServiceConfig,
    FluxBootstrapConfig,
    NetworkConfig,
    NodeGroupConfig,
)


@dataclass
class ClusterConfig:
    # None means "generate a pet name"
    cluster_name: str | None
    aws_region: str

    network: NetworkConfig
    node_group: NodeGroupConfig
    flux: FluxBootstrapConfig


def _present(**values) -> dict:
    """Drop unset keys so the model defaults apply."""
    return {key: value for key, value in values.items() if value is not None}


def load_cluster_config() -> ClusterConfig:
    config = pulumi.Config()
    aws_config = pulumi.Config("aws")

    node_group = NodeGroupConfig(
        **_present(
            instance_type=config.get("eksNodeInstanceType"),
            desired_size=config.get_int("desiredClusterSize"),
            min_size=config.get_int("minClusterSize"),
            max_size=config.get_int("maxClusterSize"),
        )
    )

    network = NetworkConfig(**_present(vpc_cidr=config.get("vpcNetworkCidr")))

    flux = FluxBootstrapConfig(
        **_present(
            version=config.get("fluxVersion"),
            repo_url=config.get("fluxRepoUrl"),
            branch=config.get("fluxBranch"),
            path=config.get("fluxPath"),
        )
    )

    cluster_config = ClusterConfig(
        cluster_name=config.get("clusterName"),
        aws_region=aws_config.require("region"),
        network=network,
        node_group=node_group,
        flux=flux,
    )

    pulumi.log.info(
        f"Cluster config: region={cluster_config.aws_region} "
        f"nodes={node_group.min_size}/{node_group.desired_size}/{node_group.max_size} "
        f"({node_group.instance_type}) cidr={network.vpc_cidr}"
    )
    return cluster_config


def load_service_config() -> FargateServiceConfig:
    config = pulumi.Config()

    return FargateServiceConfig(
        **_present(
            image=config.get("containerImage"),
            cpu=config.get_int("containerCpu"),
            memory=config.get_int("containerMemory"),
            container_port=config.get_int("containerPort"),
        )
    )
