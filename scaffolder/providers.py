"""Kubernetes provider configuration."""

import pulumi
import pulumi_kubernetes as k8s


def create_k8s_provider(
    name: str,
    kubeconfig: pulumi.Output[str],
    cluster: pulumi.Resource,
) -> k8s.Provider:
    """Create Kubernetes provider from EKS kubeconfig.

    Server-side apply is enabled so that patch resources can take field
    ownership of objects created by Helm.

    Args:
        name: Provider name prefix
        kubeconfig: EKS cluster kubeconfig (as JSON string)
        cluster: Cluster the provider must wait for
    """
    return k8s.Provider(
        f"{name}-k8s",
        kubeconfig=kubeconfig,
        enable_server_side_apply=True,
        opts=pulumi.ResourceOptions(depends_on=[cluster]),
    )
