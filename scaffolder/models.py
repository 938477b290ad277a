"""Pydantic models for validated template configuration."""

import ipaddress

from pydantic import BaseModel, Field, field_validator, model_validator


class NodeGroupConfig(BaseModel):
    """Worker node sizing for the EKS cluster."""

    instance_type: str = Field(
        default="t3.medium",
        description="EC2 instance type for worker nodes",
        min_length=1,
    )
    desired_size: int = Field(
        default=3,
        description="Desired number of nodes",
        ge=1,
    )
    min_size: int = Field(
        default=3,
        description="Minimum number of nodes",
        ge=0,
    )
    max_size: int = Field(
        default=6,
        description="Maximum number of nodes",
        ge=1,
    )

    @model_validator(mode="after")
    def validate_bounds(self) -> "NodeGroupConfig":
        """Ensure min <= desired <= max."""
        if self.min_size > self.max_size:
            raise ValueError(
                f"minClusterSize ({self.min_size}) exceeds maxClusterSize ({self.max_size})"
            )
        if not self.min_size <= self.desired_size <= self.max_size:
            raise ValueError(
                f"desiredClusterSize ({self.desired_size}) must be between "
                f"{self.min_size} and {self.max_size}"
            )
        return self


class NetworkConfig(BaseModel):
    """VPC network settings."""

    vpc_cidr: str = Field(
        default="10.0.0.0/16",
        description="VPC CIDR block",
    )

    @field_validator("vpc_cidr")
    @classmethod
    def validate_vpc_cidr(cls, v: str) -> str:
        """Validate VPC CIDR format."""
        try:
            network = ipaddress.ip_network(v, strict=False)
            if network.prefixlen < 16 or network.prefixlen > 28:
                raise ValueError("VPC CIDR prefix must be between /16 and /28")
        except ValueError as e:
            raise ValueError(f"Invalid VPC CIDR: {e}") from e
        return v


class FluxBootstrapConfig(BaseModel):
    """Flux chart version and the Git coordinates it bootstraps from."""

    version: str = Field(
        default="2.10.1",
        description="flux2 Helm chart version",
        min_length=1,
    )
    repo_url: str = Field(
        default="https://github.com/my-backstage-demo/pulumi-gitops-repo.git",
        description="Git repository Flux reconciles from",
        min_length=1,
    )
    branch: str = Field(
        default="main",
        description="Branch to track",
        min_length=1,
    )
    path: str = Field(
        default="./flux/clusters/aws",
        description="Directory within the repository holding the cluster manifests",
        min_length=1,
    )

    @field_validator("repo_url")
    @classmethod
    def validate_repo_url(cls, v: str) -> str:
        """Flux source-controller only accepts http(s) and ssh URLs."""
        if not v.startswith(("https://", "http://", "ssh://")):
            raise ValueError(f"Unsupported repository URL scheme: {v}")
        return v


class FargateServiceConfig(BaseModel):
    """Container settings for the Fargate web service."""

    image: str = Field(
        default="amazon/amazon-ecs-sample",
        description="Container image",
        min_length=1,
    )
    cpu: int = Field(
        default=512,
        description="CPU units reserved for the container",
        gt=0,
    )
    memory: int = Field(
        default=2048,
        description="Memory (MiB) reserved for the container",
        gt=0,
    )
    container_port: int = Field(
        default=80,
        description="Port the container listens on",
        gt=0,
        le=65535,
    )
