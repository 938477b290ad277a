"""
Unit tests for stack configuration loading
Missing keys must resolve to the documented defaults
"""

import os
import sys
import unittest
from unittest.mock import patch

# Add project root to path so we can import the package
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pulumi_mocks import MissingConfig, config_factory
from scaffolder.config import load_cluster_config, load_service_config
from scaffolder.models import FluxBootstrapConfig


class TestClusterConfig(unittest.TestCase):
    """Test load_cluster_config defaults, overrides and validation"""

    def load(self, values=None, aws_values=None):
        factory = config_factory(values, aws_values)
        with patch("scaffolder.config.pulumi.Config", side_effect=factory):
            return load_cluster_config(), factory.created

    def test_defaults_when_unset(self):
        config, _ = self.load()

        self.assertEqual(config.node_group.min_size, 3)
        self.assertEqual(config.node_group.max_size, 6)
        self.assertEqual(config.node_group.desired_size, 3)
        self.assertEqual(config.node_group.instance_type, "t3.medium")
        self.assertEqual(config.network.vpc_cidr, "10.0.0.0/16")
        self.assertIsNone(config.cluster_name)
        self.assertEqual(config.aws_region, "us-west-2")

    def test_flux_defaults(self):
        config, _ = self.load()

        self.assertEqual(config.flux, FluxBootstrapConfig())
        self.assertEqual(config.flux.version, "2.10.1")
        self.assertEqual(
            config.flux.repo_url,
            "https://github.com/my-backstage-demo/pulumi-gitops-repo.git",
        )
        self.assertEqual(config.flux.branch, "main")
        self.assertEqual(config.flux.path, "./flux/clusters/aws")

    def test_overrides(self):
        config, _ = self.load(
            {
                "minClusterSize": 1,
                "maxClusterSize": 10,
                "desiredClusterSize": 4,
                "eksNodeInstanceType": "m6i.large",
                "vpcNetworkCidr": "10.10.0.0/16",
                "clusterName": "blue-happy-otter",
                "fluxBranch": "staging",
                "fluxPath": "./flux/clusters/staging",
            }
        )

        self.assertEqual(config.node_group.min_size, 1)
        self.assertEqual(config.node_group.max_size, 10)
        self.assertEqual(config.node_group.desired_size, 4)
        self.assertEqual(config.node_group.instance_type, "m6i.large")
        self.assertEqual(config.network.vpc_cidr, "10.10.0.0/16")
        self.assertEqual(config.cluster_name, "blue-happy-otter")
        self.assertEqual(config.flux.branch, "staging")
        self.assertEqual(config.flux.path, "./flux/clusters/staging")
        self.assertEqual(config.flux.version, "2.10.1")

    def test_partial_sizing_keeps_other_defaults(self):
        config, _ = self.load({"maxClusterSize": 8})

        self.assertEqual(config.node_group.min_size, 3)
        self.assertEqual(config.node_group.desired_size, 3)
        self.assertEqual(config.node_group.max_size, 8)

    def test_desired_outside_bounds_rejected(self):
        with self.assertRaises(ValueError):
            self.load({"desiredClusterSize": 7})

    def test_min_above_max_rejected(self):
        with self.assertRaises(ValueError):
            self.load({"minClusterSize": 5, "maxClusterSize": 4, "desiredClusterSize": 4})

    def test_node_group_may_scale_to_zero(self):
        config, _ = self.load({"minClusterSize": 0, "desiredClusterSize": 1, "maxClusterSize": 3})

        self.assertEqual(config.node_group.min_size, 0)
        self.assertEqual(config.node_group.desired_size, 1)

    def test_zero_desired_or_max_rejected(self):
        for values in [
            {"minClusterSize": 0, "desiredClusterSize": 0},
            {"minClusterSize": 0, "desiredClusterSize": 0, "maxClusterSize": 0},
        ]:
            with self.subTest(values=values):
                with self.assertRaises(ValueError):
                    self.load(values)

    def test_small_vpc_prefixes_accepted(self):
        for cidr in ["10.0.0.0/24", "10.0.0.0/26", "10.0.0.0/28"]:
            with self.subTest(cidr=cidr):
                config, _ = self.load({"vpcNetworkCidr": cidr})
                self.assertEqual(config.network.vpc_cidr, cidr)

    def test_invalid_cidr_rejected(self):
        for cidr in ["not-a-cidr", "10.0.0.0/8", "10.0.0.0/29"]:
            with self.subTest(cidr=cidr):
                with self.assertRaises(ValueError):
                    self.load({"vpcNetworkCidr": cidr})

    def test_unsupported_repo_url_rejected(self):
        with self.assertRaises(ValueError):
            self.load({"fluxRepoUrl": "git@github.com:example/repo.git"})

    def test_region_is_required(self):
        _, created = self.load()
        created["aws"].require.assert_called_once_with("region")

        with self.assertRaises(MissingConfig):
            self.load(aws_values={})


class TestServiceConfig(unittest.TestCase):
    """Test load_service_config for the Fargate template"""

    def load(self, values=None):
        with patch("scaffolder.config.pulumi.Config", side_effect=config_factory(values)):
            return load_service_config()

    def test_defaults_when_unset(self):
        service = self.load()

        self.assertEqual(service.image, "amazon/amazon-ecs-sample")
        self.assertEqual(service.cpu, 512)
        self.assertEqual(service.memory, 2048)
        self.assertEqual(service.container_port, 80)

    def test_overrides(self):
        service = self.load({"containerImage": "nginx:1.27", "containerCpu": 256, "containerPort": 8080})

        self.assertEqual(service.image, "nginx:1.27")
        self.assertEqual(service.cpu, 256)
        self.assertEqual(service.memory, 2048)
        self.assertEqual(service.container_port, 8080)

    def test_invalid_port_rejected(self):
        with self.assertRaises(ValueError):
            self.load({"containerPort": 70000})


if __name__ == "__main__":
    unittest.main()
