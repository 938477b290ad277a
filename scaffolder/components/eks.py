import pulumi
import pulumi_eks as eks

from scaffolder.models import NodeGroupConfig


class EksCluster(pulumi.ComponentResource):
    """EKS cluster with an OIDC provider for IRSA.

    Load balancers go in the public subnets, worker nodes in the private ones
    without public IP addresses.
    """

    def __init__(
        self,
        name: str,
        cluster_name: pulumi.Input[str],
        vpc_id: pulumi.Output[str],
        public_subnet_ids: pulumi.Output,
        private_subnet_ids: pulumi.Output,
        node_group: NodeGroupConfig,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("scaffolder:infrastructure:EksCluster", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.cluster = eks.Cluster(
            f"{name}-cluster",
            name=cluster_name,
            vpc_id=vpc_id,
            public_subnet_ids=public_subnet_ids,
            private_subnet_ids=private_subnet_ids,
            instance_type=node_group.instance_type,
            desired_capacity=node_group.desired_size,
            min_size=node_group.min_size,
            max_size=node_group.max_size,
            node_associate_public_ip_address=False,
            create_oidc_provider=True,
            opts=child_opts,
        )

        self.cluster_name = self.cluster.eks_cluster.name
        self.kubeconfig = self.cluster.kubeconfig
        self.kubeconfig_json = self.cluster.kubeconfig_json
        self.oidc_provider_arn = self.cluster.core.oidc_provider.arn
        self.oidc_provider_url = self.cluster.core.oidc_provider.url

        self.register_outputs(
            {
                "cluster_name": self.cluster_name,
                "oidc_provider_arn": self.oidc_provider_arn,
                "oidc_provider_url": self.oidc_provider_url,
            }
        )
