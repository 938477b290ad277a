"""EKS with Flux - cluster, load balancer controller IRSA and GitOps bootstrap."""

import pulumi
import pulumi_random as random

from scaffolder.components.alb_controller import (
    AlbControllerIam,
    create_controller_values_secret,
)
from scaffolder.components.eks import EksCluster
from scaffolder.components.flux import Flux
from scaffolder.components.networking import Networking
from scaffolder.config import load_cluster_config
from scaffolder.policies import load_policy_document
from scaffolder.providers import create_k8s_provider

ALB_POLICY_PATH = "./iam-policies/alb-iam-policy.json"

# Load stack configuration
config = load_cluster_config()

# Read before declaring anything so a missing file fails the whole program
alb_policy_document = load_policy_document(ALB_POLICY_PATH)

# Cluster name, generated once and kept in state when not configured
if config.cluster_name:
    cluster_name = config.cluster_name
else:
    cluster_name = random.RandomPet("cluster-name", length=3, separator="-").id

# 1. Networking (VPC, public and private subnets)
networking = Networking(name="eks", vpc_cidr=config.network.vpc_cidr)

# 2. EKS cluster with OIDC provider
eks_cluster = EksCluster(
    name="eks",
    cluster_name=cluster_name,
    vpc_id=networking.vpc_id,
    public_subnet_ids=networking.public_subnet_ids,
    private_subnet_ids=networking.private_subnet_ids,
    node_group=config.node_group,
)

pulumi.export("kubeconfig", pulumi.Output.secret(eks_cluster.kubeconfig))

# 3. IRSA role for the AWS Load Balancer Controller
alb_iam = AlbControllerIam(
    name="alb",
    oidc_provider_arn=eks_cluster.oidc_provider_arn,
    oidc_provider_url=eks_cluster.oidc_provider_url,
    policy_document=alb_policy_document,
)

# 4. Kubernetes provider from EKS kubeconfig
k8s_provider = create_k8s_provider(
    name="eks",
    kubeconfig=eks_cluster.kubeconfig_json,
    cluster=eks_cluster.cluster,
)

# 5. Flux GitOps bootstrap
flux = Flux(
    "flux",
    cluster_name=eks_cluster.cluster_name,
    bootstrap=config.flux,
    opts=pulumi.ResourceOptions(providers={"kubernetes": k8s_provider}),
)

# 6. Helm values for the controller release Flux installs
create_controller_values_secret(
    "aws-lb-controller-secret",
    namespace=flux.namespace,
    cluster_name=eks_cluster.cluster_name,
    region=config.aws_region,
    role_arn=alb_iam.role_arn,
    vpc_id=networking.vpc_id,
    k8s_provider=k8s_provider,
)

# Exports
pulumi.export("clusterName", eks_cluster.cluster_name)
pulumi.export("vpcId", networking.vpc_id)
pulumi.export("albRoleArn", alb_iam.role_arn)
pulumi.export("fluxNamespace", flux.namespace)
