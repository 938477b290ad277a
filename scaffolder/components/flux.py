"""Flux GitOps bootstrap.

Installs the Flux controllers from the community Helm chart and points them at
a bootstrap repository:
- Helm release of the flux2 chart
- Backstage discovery label patched onto every controller Deployment
- GitRepository source for the bootstrap repository
- Kustomization applying the bootstrap path from that source
"""

import pulumi
import pulumi_kubernetes as k8s

from scaffolder.models import FluxBootstrapConfig

FLUX_CHART = "oci://ghcr.io/fluxcd-community/charts/flux2"
FLUX_NAMESPACE = "flux-system"
BACKSTAGE_LABEL = "backstage.io/kubernetes-id"
GITOPS_COMPONENT_ID = "gitops-cluster"

# Deployment name -> key of the controller section in the chart values
FLUX_CONTROLLERS = {
    "kustomize-controller": "kustomizeController",
    "helm-controller": "helmController",
    "notification-controller": "notificationController",
    "source-controller": "sourceController",
    "image-reflector-controller": "imageReflectionController",
    "image-automation-controller": "imageAutomationController",
}

GIT_REPOSITORY_API_VERSION = "source.toolkit.fluxcd.io/v1"
GIT_REPOSITORY_KIND = "GitRepository"
BOOTSTRAP_REPO_NAME = "bootstrap-repo"

KUSTOMIZATION_API_VERSION = "kustomize.toolkit.fluxcd.io/v1"
KUSTOMIZATION_KIND = "Kustomization"
BOOTSTRAP_KUSTOMIZATION_NAME = "bootstrap-kustomization"

RECONCILE_INTERVAL = "1m"
GIT_TIMEOUT = "60s"


class Flux(pulumi.ComponentResource):
    """Flux controllers plus the bootstrap source and Kustomization.

    Kubernetes resources inherit the provider passed through ``opts``
    (``providers={"kubernetes": ...}``).
    """

    def __init__(
        self,
        name: str,
        cluster_name: pulumi.Input[str],
        bootstrap: FluxBootstrapConfig,
        opts: pulumi.ResourceOptions | None = None,
    ):
        super().__init__("scaffolder:gitops:Flux", name, None, opts)

        backstage_label = {BACKSTAGE_LABEL: cluster_name}

        pulumi.log.info(
            f"Bootstrapping Flux {bootstrap.version} from {bootstrap.repo_url} "
            f"({bootstrap.branch}:{bootstrap.path})",
            resource=self,
        )

        self.release = k8s.helm.v3.Release(
            f"{name}-release",
            chart=FLUX_CHART,
            version=bootstrap.version,
            namespace=FLUX_NAMESPACE,
            create_namespace=True,
            values={
                values_key: {"labels": backstage_label}
                for values_key in FLUX_CONTROLLERS.values()
            },
            opts=pulumi.ResourceOptions(parent=self),
        )
        self.namespace = self.release.namespace

        # The chart does not label the Deployment objects themselves
        self.controller_patches = [
            k8s.apps.v1.DeploymentPatch(
                f"{name}-{controller}-patch",
                metadata=k8s.meta.v1.ObjectMetaPatchArgs(
                    name=controller,
                    namespace=self.namespace,
                    labels=backstage_label,
                    annotations={"pulumi.com/patchForce": "true"},
                ),
                opts=pulumi.ResourceOptions(parent=self, depends_on=[self.release]),
            )
            for controller in FLUX_CONTROLLERS
        ]

        self.bootstrap_repo = k8s.apiextensions.CustomResource(
            f"{name}-bootstrap-repo",
            api_version=GIT_REPOSITORY_API_VERSION,
            kind=GIT_REPOSITORY_KIND,
            metadata=k8s.meta.v1.ObjectMetaArgs(
                name=BOOTSTRAP_REPO_NAME,
                namespace=self.namespace,
                labels={BACKSTAGE_LABEL: GITOPS_COMPONENT_ID},
            ),
            spec={
                "interval": RECONCILE_INTERVAL,
                "ref": {"branch": bootstrap.branch},
                "timeout": GIT_TIMEOUT,
                "url": bootstrap.repo_url,
            },
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.release]),
        )

        # Read back from the declared repository
        self.source_ref = {
            "kind": self.bootstrap_repo.kind,
            "name": self.bootstrap_repo.metadata.apply(lambda metadata: metadata["name"]),
            "namespace": self.bootstrap_repo.metadata.apply(lambda metadata: metadata["namespace"]),
        }

        self.bootstrap_kustomization = k8s.apiextensions.CustomResource(
            f"{name}-bootstrap-kustomization",
            api_version=KUSTOMIZATION_API_VERSION,
            kind=KUSTOMIZATION_KIND,
            metadata=k8s.meta.v1.ObjectMetaArgs(
                name=BOOTSTRAP_KUSTOMIZATION_NAME,
                namespace=self.namespace,
                labels={BACKSTAGE_LABEL: GITOPS_COMPONENT_ID},
            ),
            spec={
                "force": False,
                "interval": RECONCILE_INTERVAL,
                "prune": True,
                "path": bootstrap.path,
                "sourceRef": self.source_ref,
                "targetNamespace": self.namespace,
            },
            opts=pulumi.ResourceOptions(parent=self, depends_on=[self.bootstrap_repo]),
        )

        self.register_outputs({"namespace": self.namespace})
