"""AWS Load Balancer Controller prerequisites.

The controller itself is installed later by Flux from the GitOps repository.
This module declares what it needs from the cluster side:
- IRSA role, policy and attachment for the controller's service account
- a Secret with the Helm values Flux feeds to the controller's release
"""

import pulumi
import pulumi_aws as aws
import pulumi_kubernetes as k8s
import yaml

from scaffolder.policies import irsa_assume_role_policy

ALB_NAMESPACE = "aws-lb-controller"
ALB_SERVICE_ACCOUNT = f"system:serviceaccount:{ALB_NAMESPACE}:aws-lb-controller-serviceaccount"
VALUES_SECRET_NAME = "aws-load-balancer-controller-values"


class AlbControllerIam(pulumi.ComponentResource):
    """IAM role assumable by the load balancer controller's service account."""

    def __init__(
        self,
        name: str,
        oidc_provider_arn: pulumi.Output[str],
        oidc_provider_url: pulumi.Output[str],
        policy_document: str,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("scaffolder:infrastructure:AlbControllerIam", name, None, opts)

        assume_role_policy = pulumi.Output.all(oidc_provider_arn, oidc_provider_url).apply(
            lambda args: irsa_assume_role_policy(args[0], args[1], ALB_SERVICE_ACCOUNT)
        )

        self.role = aws.iam.Role(
            f"{name}-role",
            assume_role_policy=assume_role_policy,
            opts=pulumi.ResourceOptions(parent=self),
        )

        self.policy = aws.iam.Policy(
            f"{name}-policy",
            policy=policy_document,
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.role]),
        )

        self.attachment = aws.iam.RolePolicyAttachment(
            f"{name}-role-attachment",
            role=self.role.name,
            policy_arn=self.policy.arn,
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.policy]),
        )

        self.role_arn = self.role.arn
        self.policy_arn = self.policy.arn

        self.register_outputs({"role_arn": self.role_arn, "policy_arn": self.policy_arn})


def render_controller_values(cluster_name: str, region: str, role_arn: str, vpc_id: str) -> str:
    """Render the controller's Helm values as YAML."""
    return yaml.safe_dump(
        {
            "clusterName": cluster_name,
            "region": region,
            "serviceAccount": {
                "annotations": {
                    "eks.amazonaws.com/role-arn": role_arn,
                },
            },
            "vpcId": vpc_id,
        },
        sort_keys=False,
    )


def create_controller_values_secret(
    name: str,
    namespace: pulumi.Input[str],
    cluster_name: pulumi.Input[str],
    region: str,
    role_arn: pulumi.Input[str],
    vpc_id: pulumi.Input[str],
    k8s_provider: k8s.Provider,
) -> k8s.core.v1.Secret:
    """Seed the values Secret consumed by the Flux-managed controller release.

    Args:
        name: Resource name
        namespace: Namespace Flux runs in
        cluster_name: EKS cluster name
        region: AWS region of the cluster
        role_arn: ARN of the controller's IRSA role
        vpc_id: VPC the controller provisions load balancers in
        k8s_provider: Provider bound to the cluster
    """
    values = pulumi.Output.all(cluster_name, role_arn, vpc_id).apply(
        lambda args: render_controller_values(args[0], region, args[1], args[2])
    )

    return k8s.core.v1.Secret(
        name,
        metadata=k8s.meta.v1.ObjectMetaArgs(
            name=VALUES_SECRET_NAME,
            namespace=namespace,
        ),
        string_data={"values.yaml": values},
        opts=pulumi.ResourceOptions(provider=k8s_provider),
    )
